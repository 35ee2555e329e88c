# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from concurrent import futures
import swarmopt.common.typing as tp


class DelayedJob:
    """Future-like object which delays computation until the result is requested
    """

    def __init__(self, func: tp.Callable[..., tp.Any], *args: tp.Any, **kwargs: tp.Any) -> None:
        self.func = func
        self.args = args
        self.kwargs = kwargs
        self._result: tp.Optional[tp.Any] = None
        self._computed = False
        self._cancelled = False

    def done(self) -> bool:
        return True

    def cancel(self) -> bool:
        """Prevents the computation if it did not happen yet, returns whether the job is cancelled"""
        if not self._computed:
            self._cancelled = True
        return self._cancelled

    def result(self) -> tp.Any:
        if self._cancelled:
            raise futures.CancelledError(f"Job {self.func} was cancelled")
        if not self._computed:
            self._result = self.func(*self.args, **self.kwargs)
            self._computed = True
        return self._result


class SequentialExecutor:
    """Executor which runs sequentially and locally
    (the function is called when the result of the job is requested)
    """

    def submit(self, fn: tp.Callable[..., tp.Any], *args: tp.Any, **kwargs: tp.Any) -> DelayedJob:
        return DelayedJob(fn, *args, **kwargs)
