class SitemapError(Exception):
    """Base class for sitemap engine failures."""


class ConfigurationError(SitemapError):
    """Build configuration is unusable; raised before any I/O."""


class RepositoryReadError(SitemapError):
    """The content repository failed while harvesting."""


class CacheServiceError(SitemapError):
    """A cache get/set/clear call failed."""


class LockServiceError(SitemapError):
    """The build lock could not be acquired or released."""


class NotFoundError(SitemapError):
    """The requested sitemap artifact does not exist."""
