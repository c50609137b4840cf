"""Helpers for displaying fully qualified type names."""

# Characters that delimit path segments inside generic or tuple type names.
_SPECIAL = " <>()[],;"
_CLOSING = ">)]"


def _collapse(segment: str) -> str:
    return segment.split("::")[-1]


def short_name(full_name: str) -> str:
    """Shorten a fully qualified type name by dropping its module path.

    Generic arguments are shortened too, while their structure is kept:

        >>> short_name("bevy_render::camera::extract<bevy_core::Camera3d>")
        'extract<Camera3d>'

    A path that continues after a closing bracket keeps its `::` separator
    (e.g. `Foo<a::B>::Assoc`).
    """
    parsed = []
    index = 0
    end = len(full_name)
    while index < end:
        rest = full_name[index:]
        special_index = next((i for i, ch in enumerate(rest) if ch in _SPECIAL), None)
        if special_index is None:
            parsed.append(_collapse(rest))
            break
        parsed.append(_collapse(rest[:special_index]))
        special = rest[special_index]
        parsed.append(special)
        if special in _CLOSING and rest.startswith("::", special_index + 1):
            parsed.append("::")
            index += special_index + 3
        else:
            index += special_index + 1
    return "".join(parsed)
