from __future__ import annotations
from weakref import ref
from typing import Union

from ._base import BaseOption
from ..telopt import Opt


class StreamOptions(dict):
    """
    This class collects a stream's known option handlers.

    Lookup by name is via attribute, by option value via indexing.

    Options we don't know get a plain BaseOption, which refuses them.
    If you want something else, call ``add`` with the "real" handler
    before the stream starts.
    """
    def __init__(self, stream):
        super().__init__()
        self._stream = ref(stream)

    @property
    def stream(self):
        return self._stream()

    def __getattr__(self, name: str):
        """Look up by name."""
        try:
            opt = Opt[name]
        except KeyError:
            raise AttributeError(name) from None
        return self[opt.value]

    def __getitem__(self, value: int):
        """Look up by option value. Unknown options are created on the fly."""
        try:
            return super().__getitem__(value)
        except KeyError:
            self[value] = iopt = BaseOption(self.stream, value=value)
            return iopt

    def __setitem__(self, value, opt):
        if not isinstance(opt, BaseOption):
            raise RuntimeError("Can only set to an option")
        super().__setitem__(int(value), opt)

    def add(self, opt: Union[BaseOption, type]):
        """
        Use this option processor.

        Accepts an instance, or a BaseOption subclass which is
        instantiated for our stream.
        """
        if isinstance(opt, type) and issubclass(opt, BaseOption):
            opt = opt(self.stream)
        elif not isinstance(opt, BaseOption):
            raise RuntimeError("Can only add an option, not %r" % (opt,))

        if super().get(opt.value) is not None:
            self.stream.log.debug("A handler for %s already exists", opt.name)
            return super().__getitem__(opt.value)
        self[opt.value] = opt
        return opt
