"""Command line entry point: write the certification checks for a witness."""

from __future__ import annotations

import sys

from .btor2 import Btor2, Btor2Error, Line
from .encoding import Encoding

VERSION = "1.0.4"
PROG = "cerbotor"
DEFAULT_CHECKS = (
    "reset.btor2",
    "transition.btor2",
    "property.btor2",
    "base.btor2",
    "step.btor2",
)


def _msg(text: str) -> None:
    print(f"Cerbotor: {text}")


def parse_args(argv: list[str]) -> tuple[str, str, list[str]]:
    """Return the model path, the witness path and the five check paths."""
    if argv and argv[0] == "--version":
        print(VERSION)
        raise SystemExit(0)
    if len(argv) < 2 or len(argv) > 2 + len(DEFAULT_CHECKS):
        outputs = " ".join(f"<{name}>" for name in DEFAULT_CHECKS)
        print(
            f"Usage: {PROG} <model.btor2> <witness.btor2> [ {outputs} ]",
            file=sys.stderr,
        )
        raise SystemExit(1)
    checks = list(DEFAULT_CHECKS)
    checks[: len(argv) - 2] = argv[2:]
    return argv[0], argv[1], checks


def index_consecutively(witness: Btor2, model: Btor2) -> list[tuple[Line, Line]]:
    """Renumber witness then model so that shared lines have one id.

    Returns pairs of witness lines with the model lines they simulate; the
    model lines are dropped from the model.
    """
    offset = witness.reindex()
    simulation = witness.get_simulation() or witness.get_default_simulation(model)
    model.reindex(offset, [(model_id, line.id) for line, model_id in simulation])
    shared = []
    for line, model_id in simulation:
        shared.append((line, model.at(model_id)))
        model.drop(model_id)
    return shared


def reset(path, witness: Btor2, model: Btor2, shared) -> None:
    """R{K} and C and not (R'{K} and C')."""
    with Encoding(path, witness, model) as enc:
        m_reset, w_reset = [], []
        for w, m in shared:
            if w.init:
                w_reset.append(enc.beq(w.id, w.init))
            if m.init:
                m_reset.append(enc.beq(m.id, m.init))
        enc.bbad(
            enc.band(
                enc.band_all(m_reset),
                enc.band_all(model.constraints),
                enc.bnot(
                    enc.band(enc.band_all(w_reset), enc.band_all(witness.constraints))
                ),
            )
        )


def transition(path, witness: Btor2, model: Btor2, shared) -> None:
    """F{K} and C0 and C1 and C0' and not (F'{K} and C1')."""
    with Encoding(path, witness, model) as enc:
        enc.unroll(witness)
        enc.unroll(model)
        m_transition, w_transition = [], []
        for w, m in shared:
            if w.next:
                w_transition.append(enc.beq(enc.next(w.id), w.next))
            if m.next:
                m_transition.append(enc.beq(enc.next(m.id), m.next))
        enc.bbad(
            enc.band(
                enc.band_all(m_transition),
                enc.band_all(model.constraints),
                enc.band_all(enc.next_all(model.constraints)),
                enc.band_all(witness.constraints),
                enc.bnot(
                    enc.band(
                        enc.band_all(w_transition),
                        enc.band_all(enc.next_all(witness.constraints)),
                    )
                ),
            )
        )


def check_property(path, witness: Btor2, model: Btor2, shared) -> None:
    """not P and C and C' and P'."""
    with Encoding(path, witness, model) as enc:
        enc.bbad(
            enc.band(
                enc.bor_all(model.bads),
                enc.band_all(model.constraints),
                enc.band_all(witness.constraints),
                enc.bnot(enc.bor_all(witness.bads)),
            )
        )


def base(path, witness: Btor2) -> None:
    """R' and C' and not P'."""
    with Encoding(path, witness) as enc:
        initial = [enc.beq(state, value) for state, value in witness.inits()]
        enc.bbad(
            enc.band(
                enc.band_all(initial),
                enc.band_all(witness.constraints),
                enc.bor_all(witness.bads),
            )
        )


def step(path, witness: Btor2) -> None:
    """P0' and F' and C0' and C1' and not P1'."""
    with Encoding(path, witness) as enc:
        enc.unroll(witness)
        updates = [enc.beq(enc.next(state), value) for state, value in witness.nexts()]
        enc.bbad(
            enc.band(
                enc.bnot(enc.bor_all(witness.bads)),
                enc.band_all(updates),
                enc.band_all(witness.constraints),
                enc.band_all(enc.next_all(witness.constraints)),
                enc.bor_all(enc.next_all(witness.bads)),
            )
        )


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    model_path, witness_path, checks = parse_args(list(argv))
    _msg("Certify Model Checking Witnesses in Btor2")
    _msg(VERSION)
    try:
        model = Btor2(model_path)
        witness = Btor2(witness_path)
        shared = index_consecutively(witness, model)
        reset(checks[0], witness, model, shared)
        transition(checks[1], witness, model, shared)
        check_property(checks[2], witness, model, shared)
        base(checks[3], witness)
        step(checks[4], witness)
    except Btor2Error as exc:
        print(f"Cerbotor: Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Cerbotor: Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())