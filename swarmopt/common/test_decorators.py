# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
from unittest import TestCase
import numpy as np
from . import decorators
from . import errors


class DecoratorTests(TestCase):

    def test_registry(self) -> None:
        functions: decorators.Registry[tp.Callable[[], int]] = decorators.Registry()
        other: decorators.Registry[tp.Callable[[], int]] = decorators.Registry()

        @functions.register
        def dummy() -> int:
            return 12

        np.testing.assert_equal(dummy(), 12)
        np.testing.assert_array_equal(list(functions.keys()), ["dummy"])
        np.testing.assert_array_equal(list(other.keys()), [])
        functions.unregister("dummy")
        functions.unregister("other_dummy_that_does_not_exist")
        np.testing.assert_array_equal(list(functions.keys()), [])

    def test_info_registry(self) -> None:
        functions: decorators.Registry[tp.Callable[[], int]] = decorators.Registry()

        @functions.register_with_info(bounds=(-1.0, 1.0))
        def dummy_info() -> int:
            return 10

        np.testing.assert_equal(dummy_info(), 10)
        np.testing.assert_equal(functions.get_info("dummy_info"), {"bounds": (-1.0, 1.0)})
        np.testing.assert_raises(errors.UnknownNameError, functions.get_info, "no_dummy")

    def test_registry_error(self) -> None:
        functions: decorators.Registry[tp.Any] = decorators.Registry()

        @functions.register
        def dummy() -> int:
            return 12

        np.testing.assert_raises(RuntimeError, functions.register, dummy)

    def test_registry_missing_name(self) -> None:
        functions: decorators.Registry[tp.Any] = decorators.Registry(kind="function", error=errors.UnknownFunctionError)
        functions.register_name("sphere", 12)
        with self.assertRaises(KeyError) as context:
            functions["sphre"]
        assert isinstance(context.exception, errors.UnknownFunctionError)
        assert "sphere" in str(context.exception)
        assert "sphre" not in functions

    def test_registry_default_error(self) -> None:
        algorithms: decorators.Registry[tp.Any] = decorators.Registry(kind="algorithm")
        with self.assertRaises(errors.UnknownNameError) as context:
            algorithms["Moths"]
        assert not isinstance(context.exception, errors.UnknownFunctionError)
        assert 'Unknown algorithm "Moths"' in str(context.exception)
