import pytest

from cerbotor.btor2 import Btor2, Btor2Error, Tag, parse_lines
from cerbotor.encoding import Encoding

CIRCUIT = """1 sort bitvec 1
2 state 1
3 zero 1
4 init 1 2 3
5 next 1 2 2
6 bad 2
"""

SLICE_CIRCUIT = """1 sort bitvec 4
2 sort bitvec 2
3 state 1
4 slice 2 3 1 0
5 uext 1 4 2
"""

ARRAY_CIRCUIT = """1 sort bitvec 2
2 sort bitvec 8
3 sort array 1 2
4 state 3
"""


def _witness(text=CIRCUIT):
    circuit = Btor2.from_text(text)
    circuit.reindex()
    return circuit


def _lines(path):
    return path.read_text().splitlines()


def test_copy_writes_states_as_inputs(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()):
        pass
    lines = _lines(out)
    assert lines[0] == "1 sort bitvec 1"
    assert "2 input 1" in lines
    assert "2 state 1" not in lines


def test_constants_follow_the_circuit(tmp_path):
    out = tmp_path / "out.btor2"
    witness = _witness()
    with Encoding(out, witness) as enc:
        pass
    assert enc.bool_id == witness.max_id + 1
    assert enc.true_id == enc.bool_id + 1
    assert enc.offset == enc.true_id
    assert _lines(out)[-2:] == [
        f"{enc.bool_id} sort bitvec 1",
        f"{enc.true_id} one {enc.bool_id}",
    ]


def test_model_is_copied_after_witness(tmp_path):
    out = tmp_path / "out.btor2"
    witness = Btor2.from_text(CIRCUIT)
    offset = witness.reindex()
    model = Btor2.from_text(CIRCUIT)
    model.reindex(offset)
    with Encoding(out, witness, model) as enc:
        pass
    assert enc.bool_id == model.max_id + 1
    assert len(_lines(out)) == len(list(witness)) + len(list(model)) + 2
    assert len(parse_lines(out.read_text())) == len(_lines(out))


def test_file_is_closed_after_context(tmp_path):
    with Encoding(tmp_path / "out.btor2", _witness()) as enc:
        assert not enc.file.closed
    assert enc.file.closed


def test_boolean_op_formats(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()) as enc:
        first = enc.boolean_op("not", 2)
        second = enc.beq(2, 3)
        third = enc.boolean_op("ite", 1, 2, 3)
    assert _lines(out)[-3:] == [
        f"{first} not {enc.bool_id} 2",
        f"{second} eq {enc.bool_id} 2 3",
        f"{third} ite {enc.bool_id} 1 2 3",
    ]


def test_bnot_returns_new_id(tmp_path):
    with Encoding(tmp_path / "out.btor2", _witness()) as enc:
        before = enc.id
        result = enc.bnot(2)
    assert result == before + 1 == enc.id


def test_bbad_has_no_trailing_newline(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()) as enc:
        result = enc.bbad(2)
    assert out.read_text().endswith(f"\n{result} bad 2")


def test_band_single_operand_writes_nothing(tmp_path):
    with Encoding(tmp_path / "out.btor2", _witness()) as enc:
        before = enc.id
        result = enc.band(3)
    assert result == 3
    assert enc.id == before


def test_band_is_right_nested(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()) as enc:
        result = enc.band(2, 3, 1)
    assert _lines(out)[-2:] == [
        f"{result - 1} and {enc.bool_id} 3 1",
        f"{result} and {enc.bool_id} 2 {result - 1}",
    ]


def test_bor_is_right_nested(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()) as enc:
        result = enc.bor(2, 3)
    assert _lines(out)[-1] == f"{result} or {enc.bool_id} 2 3"


def test_band_needs_operand(tmp_path):
    with Encoding(tmp_path / "out.btor2", _witness()) as enc:
        with pytest.raises(TypeError):
            enc.band()


def test_band_all_empty_is_true(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()) as enc:
        before = enc.id
        result = enc.band_all([])
    assert result == enc.true_id
    assert enc.id == before


def test_bor_all_empty_is_negated_true(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()) as enc:
        result = enc.bor_all([])
    assert _lines(out)[-1] == f"{result} not {enc.bool_id} {enc.true_id}"


def test_bor_all_always_writes_false(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()) as enc:
        result = enc.bor_all([2, 3])
    assert _lines(out)[-2:] == [
        f"{result - 1} not {enc.bool_id} {enc.true_id}",
        f"{result} or {enc.bool_id} 2 3",
    ]


def test_reduce_pairs_then_carries_odd(tmp_path):
    out = tmp_path / "out.btor2"
    with Encoding(out, _witness()) as enc:
        result = enc.band_all([1, 2, 3])
    assert _lines(out)[-2:] == [
        f"{result - 1} and {enc.bool_id} 1 2",
        f"{result} and {enc.bool_id} {result - 1} 3",
    ]


@pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 7])
def test_reduce_writes_one_line_less_than_operands(tmp_path, count):
    ids = [2] * count
    with Encoding(tmp_path / "out.btor2", _witness()) as enc:
        before = enc.id
        result = enc.reduce("and", ids, enc.true_id)
    assert enc.id - before == count - 1
    assert result == (2 if count == 1 else enc.id)


def test_next_shifts_by_offset_keeping_sign(tmp_path):
    with Encoding(tmp_path / "out.btor2", _witness()) as enc:
        pass
    assert enc.next(3) == 3 + enc.offset
    assert enc.next(-3) == -(3 + enc.offset)
    assert enc.next(0) == enc.offset
    assert enc.next_all([1, -2]) == [enc.next(1), enc.next(-2)]


def test_unroll_shifts_ids_but_not_indices(tmp_path):
    out = tmp_path / "out.btor2"
    witness = _witness(SLICE_CIRCUIT)
    with Encoding(out, witness) as enc:
        enc.unroll(witness)
    off = enc.offset
    lines = _lines(out)
    assert lines[-5:] == [
        f"{off + 1} sort bitvec 4",
        f"{off + 2} sort bitvec 2",
        f"{off + 3} input {off + 1}",
        f"{off + 4} slice {off + 2} {off + 3} 1 0",
        f"{off + 5} uext {off + 1} {off + 4} 2",
    ]
    assert len(parse_lines(out.read_text())) == len(lines)


def test_unroll_array_sort(tmp_path):
    out = tmp_path / "out.btor2"
    witness = _witness(ARRAY_CIRCUIT)
    with Encoding(out, witness) as enc:
        enc.unroll(witness)
    off = enc.offset
    assert f"{off + 3} sort array {off + 1} {off + 2}" in _lines(out)
    parsed = parse_lines(out.read_text())
    assert [line.tag for line in parsed].count(Tag.INPUT) == 2


def test_unroll_rejects_gaps(tmp_path):
    witness = Btor2.from_text("1 sort bitvec 1\n3 input 1\n")
    with Encoding(tmp_path / "out.btor2", witness) as enc:
        with pytest.raises(Btor2Error):
            enc.unroll(witness)