from openref.openapi.model import Operation, PathItem, Ref, Schema


def test_ref_identity():
    first = Ref(value=Schema())
    second = Ref(value=Schema())
    assert first != second
    assert first.handle != second.handle
    assert first.value == second.value


def test_ref_state():
    ref = Ref(ref="#/components/schemas/Pet")
    assert not ref.is_resolved
    assert repr(ref) == "Ref('#/components/schemas/Pet')"
    ref.value = Schema()
    assert ref.is_resolved
    assert repr(Ref(value=Schema())) == "Ref(value=Schema)"


def test_cyclic_values_compare():
    schema = Schema(type="object")
    schema.properties["self"] = Ref(ref="#/components/schemas/Node", value=schema)
    assert schema == schema


def test_operations_order():
    item = PathItem(post=Operation(operation_id="create"), get=Operation(operation_id="list"))
    assert list(item.operations()) == ["GET", "POST"]
    assert PathItem().operations() == {}
