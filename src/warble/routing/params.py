"""Path parameter patterns for route segments like ``{id:int}``.

Captured values are always handed to handlers as strings; the type only
constrains what a segment matches.
"""

# regex pattern for each supported converter
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}
