import pytest
from mvattr.mvattr_datatypes import (
    ABSENT, AbsentHandle, AttributeList, EMPTY_ATTR, IMPLICIT_ARG_NAME,
    InstanceScope, ScalarHandle, SequenceHandle, TemplateInstance,
)
from mvattr.mvattr_errors import HandleConsumedError
from mvattr.mvattr_normalize import normalize, is_indexable, is_sized


# --- Normalizer ---

def test_normalize_none_is_absent():
    assert normalize(None) is ABSENT
    assert isinstance(normalize(None), AbsentHandle)
    assert not ABSENT

@pytest.mark.parametrize("value", ["abc", "", b"xy", bytearray(b"z"), 3, 2.5, True, object()])
def test_normalize_scalars(value):
    h = normalize(value)
    assert isinstance(h, ScalarHandle)
    assert h.value is value

def test_normalize_template_instance_is_scalar():
    st = TemplateInstance("t", "hi")
    assert normalize(st) == ScalarHandle(st)

@pytest.mark.parametrize("value", [[1], (1,), {1}, {"a": 1}, range(2), iter([1])])
def test_normalize_sequences(value):
    h = normalize(value)
    assert isinstance(h, SequenceHandle)
    assert h.source is value
    assert not h.consumed

def test_normalize_generator():
    def g():
        yield 1
    h = normalize(g())
    assert isinstance(h, SequenceHandle)
    assert list(h) == [1]

def test_capability_checks():
    assert is_indexable([1, 2])
    assert is_indexable((1,))
    assert is_indexable(range(3))
    assert not is_indexable("abc")
    assert not is_indexable({1: 2})
    assert not is_indexable(iter([1]))
    assert is_sized({1: 2})
    assert is_sized({1})
    assert not is_sized("abc")
    assert not is_sized(iter([1]))


# --- Sequence handle consumption ---

def test_sequence_handle_refuses_second_pass():
    h = normalize([1, 2, 3])
    assert list(h) == [1, 2, 3]
    assert h.consumed
    with pytest.raises(HandleConsumedError):
        iter(h)

def test_materialize_gives_reusable_list():
    h = normalize(x for x in "ab")
    items = h.materialize()
    assert isinstance(items, AttributeList)
    assert items == ["a", "b"]
    assert list(items) == list(items)
    with pytest.raises(HandleConsumedError):
        h.materialize()


# --- AttributeList ---

def test_attribute_list_str_concatenates_present_values():
    assert str(AttributeList(["a", None, 1, "b"])) == "a1b"
    assert str(AttributeList()) == ""


# --- TemplateInstance ---

def test_untyped_add_defines_arguments():
    st = TemplateInstance("page")
    assert st.formal_arguments is None
    st.add("title", "Hi")
    assert st.formal_arguments == ["title"]
    assert st.locals == ["Hi"]
    assert st.get_attribute("title") == "Hi"
    assert st.get_attribute("missing") is None

def test_add_accumulates_into_attribute_list():
    st = TemplateInstance("page")
    st.add("names", "Ter")
    st.add("names", "Tom")
    st.add("names", ["Sri", "Kay"])
    names = st.get_attribute("names")
    assert isinstance(names, AttributeList)
    assert names == ["Ter", "Tom", "Sri", "Kay"]

def test_add_copies_existing_list_before_accumulating():
    original = ["a"]
    st = TemplateInstance("page")
    st.add("xs", original)
    st.add("xs", "b")
    assert st.get_attribute("xs") == ["a", "b"]
    assert original == ["a"]

def test_add_none_then_value_keeps_both():
    st = TemplateInstance("page")
    st.add("x", None)
    st.add("x", 1)
    assert st.get_attribute("x") == [None, 1]

def test_add_rejects_dotted_names():
    st = TemplateInstance("page")
    with pytest.raises(ValueError):
        st.add("a.b", 1)

def test_typed_instance_rejects_undeclared_names():
    st = TemplateInstance("page", formal_arguments=["a"], has_formal_args=True)
    st.add("a", 1)
    assert st.locals == [1]
    with pytest.raises(KeyError):
        st.add("b", 2)

def test_unassigned_slots_are_empty():
    st = TemplateInstance("page", formal_arguments=["a", "b"], has_formal_args=True)
    assert st.locals == [EMPTY_ATTR, EMPTY_ATTR]
    assert st.attributes == {}
    st.add("b", 2)
    assert st.attributes == {"b": 2}

def test_remove_clears_slot():
    st = TemplateInstance("page")
    st.add("a", 1)
    st.remove("a")
    assert st.get_attribute("a") is None
    with pytest.raises(KeyError):
        st.remove("zzz")

def test_implicit_arg_name():
    assert IMPLICIT_ARG_NAME == "it"


# --- InstanceScope ---

def test_instance_scope_inherits_early_eval():
    st = TemplateInstance("t")
    root = InstanceScope(None, st)
    assert not root.early_eval
    early = InstanceScope(root, st, early_eval=True)
    child = InstanceScope(early, st)
    assert child.early_eval
    assert child.depth() == 2
