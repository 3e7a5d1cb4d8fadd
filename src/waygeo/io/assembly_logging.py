# io/assembly_logging.py
import json
import logging
import sys

from waygeo.assembly.hooks import NoopHooks


def _default_json_logger(name="waygeo", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=repr)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class AssemblyLogging(NoopHooks):
    """
    Structured JSON logs for segment assembly. Ring/chain outcomes and errors
    are always logged; per-way and per-vertex detail only when debug is on.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level=level)

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # --------------------------------------------------------

    def segment_entered(self, *, relation_id, segment, entry, direction):
        if self.debug:
            self._emit(
                "DEBUG",
                "segment_entered",
                relation_id=relation_id,
                segment=segment,
                entry=entry,
                direction=direction,
            )

    def connector_resolved(self, *, relation_id, boundary, target, direction):
        if self.debug:
            self._emit(
                "DEBUG",
                "connector_resolved",
                relation_id=relation_id,
                boundary=boundary,
                target=target,
                direction=direction,
            )

    def vertex_emitted(self, *, relation_id, vertex, emitted):
        if self.debug and (emitted % self.sample_every) == 0:
            self._emit("DEBUG", "vertex_emitted", relation_id=relation_id, vertex=vertex, emitted=emitted)

    def closed(self, *, relation_id, origin, emitted, segments):
        self._emit(
            "INFO", "ring_closed", relation_id=relation_id, origin=origin, emitted=emitted, segments=segments
        )

    def exhausted(self, *, relation_id, origin, emitted, segments):
        self._emit(
            "INFO",
            "chain_exhausted",
            relation_id=relation_id,
            origin=origin,
            emitted=emitted,
            segments=segments,
        )

    def error(self, *, relation_id, reason: str, **extra):
        self._emit("ERROR", "assembly_error", relation_id=relation_id, reason=reason, **extra)
