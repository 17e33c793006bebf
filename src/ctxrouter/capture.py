"""Per-dispatch log capture.

``CtxLogHandler`` is a ``logging.Handler`` that appends every record emitted
while a context is being dispatched to that context's ``meta.log.stdout``.
Install it on whichever logger your handlers use::

    import logging
    from ctxrouter.capture import CtxLogHandler

    logging.getLogger("app").addHandler(CtxLogHandler())

Records emitted outside ``exec()`` are ignored by this handler.
"""

import logging

from ctxrouter.context import LogBuffer, ctx_var


class CtxLogHandler(logging.Handler):
    """Append formatted records to the current context's log buffer."""

    def __init__(self, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        ctx = ctx_var.get(None)
        if ctx is None:
            return
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        if ctx.meta.log is None:
            ctx.meta.log = LogBuffer()
        ctx.meta.log.stdout.append(line)
