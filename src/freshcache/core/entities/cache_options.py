"""Per-request cache options entity.

The options mirror the request directives of HTTP ``Cache-Control``
(RFC 9111 section 5.2.1), so they can be built straight from a header.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestCacheOptions:
    """Directives controlling how a single request uses the cache.

    Defaults are permissive: read from the cache and write results back.

    Attributes:
        use_cache: If False the store is not consulted and the value is
            always recomputed.
        max_age: Maximum acceptable entry age in seconds. 0 means unset.
        only_if_cached: Never recompute inside the throttle window; return
            whatever is cached, even nothing.
        no_store: Do not write a recomputed value back to the store.
    """

    use_cache: bool = True
    max_age: int = 0
    only_if_cached: bool = False
    no_store: bool = False

    @property
    def has_max_age(self) -> bool:
        """Check if a max age limit is set."""
        return self.max_age > 0

    def to_header(self) -> str:
        """Render the options as a ``Cache-Control`` request header value.

        Returns:
            The header value, or an empty string for default options.
        """
        directives: list[str] = []
        if not self.use_cache:
            directives.append("no-cache")
        if self.has_max_age:
            directives.append(f"max-age={self.max_age}")
        if self.only_if_cached:
            directives.append("only-if-cached")
        if self.no_store:
            directives.append("no-store")
        return ", ".join(directives)

    @classmethod
    def from_header(cls, value: str | None) -> "RequestCacheOptions":
        """Create options from a ``Cache-Control`` request header value.

        Unknown directives and malformed ``max-age`` values are ignored.

        Args:
            value: The raw header value, e.g. ``"max-age=60, no-store"``.

        Returns:
            A new RequestCacheOptions instance.
        """
        if not value:
            return cls()

        use_cache = True
        max_age = 0
        only_if_cached = False
        no_store = False

        for directive in value.split(","):
            name, _, argument = directive.strip().partition("=")
            name = name.strip().lower()

            if name == "no-cache":
                use_cache = False
            elif name == "max-age":
                try:
                    max_age = max(0, int(argument.strip().strip('"')))
                except ValueError:
                    continue
            elif name == "only-if-cached":
                only_if_cached = True
            elif name == "no-store":
                no_store = True

        return cls(
            use_cache=use_cache,
            max_age=max_age,
            only_if_cached=only_if_cached,
            no_store=no_store,
        )

    @classmethod
    def no_cache(cls) -> "RequestCacheOptions":
        """Create options that skip the cache read path."""
        return cls(use_cache=False)
