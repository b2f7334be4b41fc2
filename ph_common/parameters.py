from collections import UserDict
from collections.abc import Iterable, Mapping


class ParameterSet(UserDict):
    """
    Name-unique mapping of request fields (HTTP headers or form fields) to string values

    Names match case-insensitively, so ``sph-Account`` and ``SPH-ACCOUNT`` address the same field, but the
    name most recently written is kept for serialization. A later write to an existing name overwrites it.
    Insertion order carries no meaning for signing; the canonicalizer imposes its own order.
    """

    def __init__(self, fields: Mapping[str, str | None] | Iterable[tuple[str, str | None]] | None = None, /):
        # lower-cased name -> name as last written
        self._names: dict[str, str] = {}
        super().__init__()
        if fields:
            self.update(fields)

    def __setitem__(self, key: str, value: str | None):
        key = str(key)
        self._names[key.lower()] = key
        super().__setitem__(key.lower(), value)

    def __getitem__(self, key: str):
        return super().__getitem__(key.lower())

    def __delitem__(self, key: str):
        super().__delitem__(key.lower())
        del self._names[key.lower()]

    def __contains__(self, key: object):
        return isinstance(key, str) and key.lower() in self.data

    def __iter__(self):
        return iter(self._names[key] for key in self.data)

    def get(self, key: str, default=None):
        return super().get(key.lower(), default)

    def pop(self, key: str, *args):
        return super().pop(key.lower(), *args)

    def copy(self) -> 'ParameterSet':
        return ParameterSet(self.items())

    def to_list(self) -> list[tuple[str, str | None]]:
        """Name/value pairs with original name casing, suitable for form encoding"""
        return list(self.items())
