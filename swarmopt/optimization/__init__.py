# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .base import Population  # abstract class, for type checking
from .base import ConfiguredPopulation
from .vector import FixedVector
from .bats import Bats
from .butterflies import Butterflies
from .base import registry
