class ContentTypeRegistry:
    """Content collections that opted in to the sitemap, in registration order."""

    def __init__(self, type_names: tuple[str, ...] | list[str] = ()) -> None:
        self._types: dict[str, None] = {}
        for type_name in type_names:
            self.register(type_name)

    def register(self, type_name: str) -> None:
        name = (type_name or "").strip()
        if not name:
            raise ValueError("Content type name must not be empty.")
        self._types.setdefault(name, None)

    def eligible(self, exclude_types: tuple[str, ...] = ()) -> list[str]:
        return [name for name in self._types if name not in exclude_types]

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __len__(self) -> int:
        return len(self._types)
