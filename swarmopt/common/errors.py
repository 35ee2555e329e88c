# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

# base classes


class SwarmoptError(Exception):
    """Base class for error raised by swarmopt"""


class SwarmoptWarning(Warning):
    pass


# errors
# pylint: disable=too-many-ancestors


class ConfigurationError(ValueError, SwarmoptError):
    """Invalid settings (bounds, counts, names), detected before any agent or lane is created"""


class UnknownNameError(KeyError, SwarmoptError):
    """Requested name is not in a registry"""


class UnknownFunctionError(UnknownNameError):
    """Requested objective function is not registered"""


class LaneFailureError(RuntimeError, SwarmoptError):
    """A lane of a batch run failed, which aborts the whole batch"""


# warnings


class IllDefinedParameterWarning(RuntimeWarning, SwarmoptWarning):
    """Parameter is accepted but its value makes the algorithm behavior ill-defined
    (eg: a probability outside of [0, 1])
    """
