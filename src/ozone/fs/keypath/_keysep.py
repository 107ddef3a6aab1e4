"""Object-store key path specification, in the same vein as :module:`posixpath` and :module:`ntpath`.

Keys are Posix-like, but we don't use the builtin :module:`posixpath` (or the host platform's path type) because its
parsing rules around redundant separators, `//`-prefixes and trailing separators are not the rules of a flat key
namespace. Everything that splits or renders a key goes through this module instead.
"""

sep = "/"
"""The default delimiter between key components."""


def join(*parts: str, delimiter: str = sep) -> str:
    """Join non-empty components with the delimiter, without any normalization."""
    return delimiter.join(part for part in parts if part)


__all__ = ("join", "sep")
