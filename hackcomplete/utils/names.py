NAMESPACE_SEPARATOR = "\\"


def strip_ns(name: str) -> str:
    """
    Drop the leading namespace separator of a fully qualified name.

    Examples:
        \\Foo\\bar -> Foo\\bar
        bar -> bar
    """
    if name.startswith(NAMESPACE_SEPARATOR):
        return name[1:]
    return name


def strip_all_ns(name: str) -> str:
    """Keep only the unqualified part of a name (after the last separator)."""
    return name.rsplit(NAMESPACE_SEPARATOR, 1)[-1]
