"""
Remote key construction.

Rules:
    1. Leading "../" and "./" segments and leading separators are stripped
       from asset names. Assets emitted outside the bundler's output
       directory get names such as "../assets/logo.png" or
       "/../assets/logo.png" and must stay inside the upload namespace.
    2. A non-empty base path always ends with exactly one "/".
    3. The key is base path + normalized name, minus one leading "/".

Example:
    >>> build_remote_key(add_trailing_separator("static"), "../assets/logo.png")
    'static/assets/logo.png'
    >>> build_remote_key("", "/index.html")
    'index.html'
"""

SEPARATOR = "/"
_LEADING_SEGMENTS = ("../", "./", SEPARATOR)


def normalize_asset_name(name: str) -> str:
    """Strip leading "../", "./" and "/" segments from an asset name."""
    normalized = name.replace("\\", SEPARATOR)
    stripped = True
    while stripped:
        stripped = False
        for segment in _LEADING_SEGMENTS:
            if normalized.startswith(segment):
                normalized = normalized[len(segment):]
                stripped = True
    return normalized


def add_trailing_separator(base_path: str) -> str:
    """Return ``base_path`` ending in exactly one "/" ("" stays "")."""
    if not base_path:
        return ""
    return base_path.rstrip(SEPARATOR) + SEPARATOR


def build_remote_key(base_path: str, name: str) -> str:
    """
    Join a base path and an asset name into an object key.

    Args:
        base_path: Key prefix, with or without trailing separator
        name: Asset name (normalized here if it isn't already)

    Returns:
        Object key that never starts with "/"
    """
    key = add_trailing_separator(base_path) + normalize_asset_name(name).lstrip(SEPARATOR)
    if key.startswith(SEPARATOR):
        key = key[1:]
    return key
