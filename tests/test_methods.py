import pytest

from conftest import H1, H2, header_json, transaction_json
from uckb_jsonrpc import methods as m
from uckb_jsonrpc.errors import DecodeError, InvalidParams, UnknownMethod
from uckb_jsonrpc.methods import CKB_METHODS, MethodDescriptor, MethodRegistry, Param
from uckb_jsonrpc.types.chain import HeaderView, OutPoint, Transaction
from uckb_jsonrpc.types.primitives import Uint64


def test_ckb_table_covers_every_module() -> None:
    names = {d.name for d in CKB_METHODS}
    assert {
        "get_tip_block_number",
        "get_block",
        "get_live_cell",
        "send_transaction",
        "tx_pool_info",
        "get_blockchain_info",
        "get_peers",
        "set_ban",
        "dry_run_transaction",
        "calculate_dao_maximum_withdraw",
    } <= names
    assert len(CKB_METHODS) == 29
    assert CKB_METHODS.get("get_tip_header") is m.GET_TIP_HEADER


def test_encode_params_in_wire_order() -> None:
    out_point = OutPoint(tx_hash=H1, index=1)
    assert m.GET_LIVE_CELL.encode_params(out_point, True) == [
        {"tx_hash": H1, "index": "0x1"},
        True,
    ]
    assert m.GET_BLOCK_BY_NUMBER.encode_params(1024) == ["0x400"]
    assert m.GET_BLOCK.encode_params(bytes.fromhex(H2[2:])) == [H2]
    assert m.GET_TIP_BLOCK_NUMBER.encode_params() == []


def test_trailing_optional_params_are_dropped() -> None:
    assert m.GET_TRANSACTION_PROOF.encode_params([H1]) == [[H1]]
    assert m.GET_TRANSACTION_PROOF.encode_params([H1], None) == [[H1]]
    assert m.GET_TRANSACTION_PROOF.encode_params([H1], H2) == [[H1], H2]
    # interior gaps stay as null so positions line up
    assert m.SET_BAN.encode_params("1.2.3.4", "insert", None, None, "spam") == [
        "1.2.3.4",
        "insert",
        None,
        None,
        "spam",
    ]
    assert m.SET_BAN.encode_params("1.2.3.4", "delete") == ["1.2.3.4", "delete"]


def test_transaction_param_omits_absent_type_scripts() -> None:
    wire = transaction_json()
    del wire["hash"]
    tx = Transaction.from_json(wire)
    (encoded, ) = m.DRY_RUN_TRANSACTION.encode_params(tx)
    assert encoded == wire
    assert "type" not in encoded["outputs"][0]


@pytest.mark.parametrize(
    "descriptor, args",
    [
        (m.GET_TIP_BLOCK_NUMBER, (1,)),
        (m.ADD_NODE, ("peer",)),
        (m.GET_BLOCK, ("0x1234",)),
        (m.GET_BLOCK_BY_NUMBER, (-1,)),
        (m.SET_NETWORK_ACTIVE, ("yes",)),
        (m.SET_BAN, ("1.2.3.4", "ban")),
        (m.SEND_TRANSACTION, ({"version": "0x0"},)),
    ],
)
def test_bad_arguments_raise_invalid_params(descriptor, args) -> None:
    with pytest.raises(InvalidParams):
        descriptor.encode_params(*args)


def test_decode_result() -> None:
    assert m.GET_TIP_BLOCK_NUMBER.decode_result("0x400") == 1024
    assert m.GET_BLOCK.decode_result(None) is None
    assert m.CLEAR_TX_POOL.decode_result(None) is None
    header = m.GET_TIP_HEADER.decode_result(header_json())
    assert isinstance(header, HeaderView)
    assert m.GET_TIP_HEADER.encode_result(header) == header_json()


def test_decode_result_shape_mismatch() -> None:
    with pytest.raises(DecodeError) as exc_info:
        m.GET_TIP_BLOCK_NUMBER.decode_result("not-a-hex-number")
    assert exc_info.value.method == "get_tip_block_number"

    with pytest.raises(DecodeError):
        m.GET_TIP_HEADER.decode_result(None)
    with pytest.raises(DecodeError):
        m.GET_PEERS.decode_result({"not": "a list"})


def test_registry_is_extensible() -> None:
    registry = CKB_METHODS.copy(name="indexer")
    descriptor = registry.register("get_indexer_tip_number", result=Uint64, description="indexer tip")

    assert registry.get("get_indexer_tip_number") is descriptor
    assert "get_indexer_tip_number" not in CKB_METHODS
    assert registry.list_methods()["get_indexer_tip_number"]["description"] == "indexer tip"

    with pytest.raises(ValueError):
        registry.register("get_indexer_tip_number")
    registry.register("get_indexer_tip_number", Param("flag", bool, optional=True), replace=True)


def test_unknown_method() -> None:
    with pytest.raises(UnknownMethod) as exc_info:
        MethodRegistry().get("nope")
    assert exc_info.value.method == "nope"


def test_descriptor_defaults_to_raw_json() -> None:
    descriptor = MethodDescriptor(name="anything")
    assert descriptor.decode_result({"a": [1, None]}) == {"a": [1, None]}


def test_results_must_be_hex_strings() -> None:
    with pytest.raises(DecodeError):
        m.CALCULATE_DAO_MAXIMUM_WITHDRAW.decode_result(12345)
    with pytest.raises(DecodeError):
        m.GET_TIP_HEADER.decode_result({**header_json(), "number": 1024})

    # Python ints are still fine on the way out
    assert m.CALCULATE_DAO_MAXIMUM_WITHDRAW.encode_params(OutPoint(tx_hash=H1, index=0), H2) == [
        {"tx_hash": H1, "index": "0x0"},
        H2,
    ]
