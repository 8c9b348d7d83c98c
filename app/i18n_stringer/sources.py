"""Symbol sources: providers of ordered symbol declarations per type.

Extracting constants from program source is not part of this package; a
source only hands over already-resolved (type, name, value, signed)
declarations, aliases included.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Type

import yaml

import structlog
from i18n_stringer.exceptions import ConfigurationError
from i18n_stringer.models import SymbolDeclaration

logger = structlog.get_logger().bind(component="i18n_stringer.sources")


class SymbolSource(ABC):
    """Abstract base for symbol sources."""

    @abstractmethod
    def load(self, type_name: str) -> List[SymbolDeclaration]:
        """Return the declarations of ``type_name`` in declaration order.

        An unknown type yields an empty list.
        """
        pass

    def type_names(self) -> List[str]:
        """Names of every type the source knows about."""
        return []


class StaticSymbolSource(SymbolSource):
    """Source backed by an in-memory sequence of declarations.

    Accepts SymbolDeclaration instances or plain
    ``(type_name, name, value, signed)`` tuples.
    """

    def __init__(self, declarations: Iterable[Tuple]):
        self._declarations: Dict[str, List[SymbolDeclaration]] = {}
        for item in declarations:
            declaration = SymbolDeclaration(*item)
            self._declarations.setdefault(declaration.type_name, []).append(
                declaration
            )

    def load(self, type_name: str) -> List[SymbolDeclaration]:
        return list(self._declarations.get(type_name, []))

    def type_names(self) -> List[str]:
        return list(self._declarations)


class EnumSymbolSource(SymbolSource):
    """Source reading integer Enum classes by reflection.

    Aliases come from ``__members__`` in declaration order. An enum is
    signed unless it sets ``__signed__ = False``.
    """

    def __init__(self, *enums: Type[Enum]):
        self._enums: Dict[str, Type[Enum]] = {}
        for enum_cls in enums:
            self._enums[enum_cls.__name__] = enum_cls

    def load(self, type_name: str) -> List[SymbolDeclaration]:
        enum_cls = self._enums.get(type_name)
        if enum_cls is None:
            return []
        signed = bool(getattr(enum_cls, "__signed__", True))
        declarations = []
        for name, member in enum_cls.__members__.items():
            value = member.value
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"can't handle non-integer constant {type_name}.{name}",
                    key=name,
                )
            declarations.append(SymbolDeclaration(type_name, name, value, signed))
        return declarations

    def type_names(self) -> List[str]:
        return list(self._enums)


class YAMLSymbolSource(SymbolSource):
    """Source reading symbol declarations from a YAML file.

    Expected format:

        Code:
          signed: false
          symbols:
            CodeOK: 1
            CodeErr: 2
            CodeFail: 3

    Attributes:
        path: YAML file path.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(
                f"read symbol file `{self.path}` occur err {e}", path=str(self.path)
            ) from e
        except yaml.YAMLError as e:
            logger.error("yaml_parse_error", file=str(self.path), error=str(e))
            raise ConfigurationError(
                f"Failed to parse {self.path}: {e}", path=str(self.path)
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"symbol file `{self.path}` must map type names to declarations",
                path=str(self.path),
            )
        self._declarations = {
            type_name: self._parse_type(type_name, body)
            for type_name, body in data.items()
        }
        logger.info(
            "loaded_symbol_file",
            file=str(self.path),
            type_count=len(self._declarations),
        )

    def _parse_type(self, type_name: str, body) -> List[SymbolDeclaration]:
        if not isinstance(body, dict) or not isinstance(body.get("symbols") or {}, dict):
            raise ConfigurationError(
                f"type `{type_name}` in `{self.path}` must define a `symbols` mapping",
                path=str(self.path),
                key=type_name,
            )
        signed = bool(body.get("signed", True))
        declarations = []
        for name, value in (body.get("symbols") or {}).items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"value of `{type_name}.{name}` in `{self.path}` must be an integer",
                    path=str(self.path),
                    key=str(name),
                )
            declarations.append(SymbolDeclaration(type_name, str(name), value, signed))
        return declarations

    def load(self, type_name: str) -> List[SymbolDeclaration]:
        return list(self._declarations.get(type_name, []))

    def type_names(self) -> List[str]:
        return list(self._declarations)
