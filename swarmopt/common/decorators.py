# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import functools
from . import errors


X = tp.TypeVar("X")


class Registry(tp.MutableMapping[str, X]):
    """Registers functions or configured objects by name.
    Missing names raise an UnknownNameError (or the provided subclass) listing what is available,
    so that typos in command lines are caught before any computation.
    """

    def __init__(self, kind: str = "object", error: tp.Type[errors.UnknownNameError] = errors.UnknownNameError) -> None:
        super().__init__()
        self.kind = kind
        self._error = error
        self.data: tp.Dict[str, X] = {}
        self._information: tp.Dict[str, tp.Dict[tp.Hashable, tp.Any]] = {}

    def register(self, obj: X, info: tp.Optional[tp.Dict[tp.Hashable, tp.Any]] = None) -> X:
        """Decorator method for registering functions/classes
        The info variable can be filled up using the register_with_info
        decorator instead of this one.
        """
        name = getattr(obj, "__name__", obj.__class__.__name__)
        self.register_name(name, obj, info)
        return obj

    def register_name(self, name: str, obj: X, info: tp.Optional[tp.Dict[tp.Hashable, tp.Any]] = None) -> None:
        """Register an object with a provided name"""
        if name in self:
            raise RuntimeError(f'Encountered a name collision "{name}"')
        self.data[name] = obj
        if info is not None:
            assert isinstance(info, dict)
            self._information[name] = info

    def unregister(self, name: str) -> None:
        if name in self:
            del self[name]

    def register_with_info(self, **info: tp.Any) -> tp.Callable[[X], X]:
        """Decorator for registering a function and information about it
        (eg: its domain bounds)
        """
        return functools.partial(self.register, info=info)

    def get_info(self, name: str) -> tp.Dict[tp.Hashable, tp.Any]:
        if name not in self:
            raise self._error(self._missing_message(name))
        return self._information.setdefault(name, {})

    def _missing_message(self, name: str) -> str:
        return f'Unknown {self.kind} "{name}", available: {sorted(self.data)}'

    def __getitem__(self, key: str) -> X:
        try:
            return self.data[key]
        except KeyError as e:
            raise self._error(self._missing_message(key)) from e

    def __setitem__(self, key: str, value: X) -> None:
        self.register_name(key, value)

    def __delitem__(self, key: str) -> None:
        del self.data[key]
        self._information.pop(key, None)

    def __contains__(self, key: tp.Any) -> bool:
        return key in self.data

    def __iter__(self) -> tp.Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)
