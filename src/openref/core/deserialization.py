from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING, Any, BinaryIO, TextIO

if TYPE_CHECKING:
    import yaml

# PyYAML misses floats in scientific notation without a dot, e.g. `1e-05`
_FLOAT_PATTERN = re.compile(
    r"""^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+]?[0-9]+)?
           |[-+]?(?:[0-9][0-9_]*)(?:[eE][-+]?[0-9]+)
           |\.[0-9_]+(?:[eE][-+]?[0-9]+)?
           |[-+]?[0-9][0-9_]*(?::[0-5]?[0-9])+\.[0-9_]*
           |[-+]?\.(?:inf|Inf|INF)
           |\.(?:nan|NaN|NAN))$""",
    re.VERBOSE,
)


@lru_cache
def get_yaml_loader() -> type[yaml.SafeLoader]:
    """Create a YAML loader that keeps mapping keys as strings and does not parse timestamps."""
    import yaml

    try:
        from yaml import CSafeLoader as SafeLoader
    except ImportError:
        from yaml import SafeLoader  # type: ignore[assignment]

    cls: type[yaml.SafeLoader] = type("DocumentLoader", (SafeLoader,), {})
    cls.yaml_implicit_resolvers = {
        key: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
        for key, resolvers in cls.yaml_implicit_resolvers.copy().items()
    }
    cls.add_implicit_resolver(  # type: ignore[no-untyped-call]
        "tag:yaml.org,2002:float", _FLOAT_PATTERN, list("-+0123456789.")
    )

    def construct_mapping(self: SafeLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
        if isinstance(node, yaml.MappingNode):
            self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            # Response status codes like `200` or YAML 1.1 booleans like `on` must stay strings
            if key_node.tag != "tag:yaml.org,2002:str":
                key = key_node.value
            else:
                key = self.construct_object(key_node, deep)  # type: ignore[no-untyped-call]
            mapping[key] = self.construct_object(value_node, deep)  # type: ignore[no-untyped-call]
        return mapping

    cls.construct_mapping = construct_mapping  # type: ignore[method-assign,assignment]
    return cls


def deserialize_yaml(stream: str | bytes | TextIO | BinaryIO) -> Any:
    import yaml

    return yaml.load(stream, get_yaml_loader())
