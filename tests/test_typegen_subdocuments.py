"""
Tests for subdocument hoisting — naming, placement, optionality, cycles.
"""

import pytest

from schematsgen.core.models import RenderContext, Schema
from schematsgen.core.services.typegen import CircularSchemaError, compile_schema, parse_schema
from schematsgen.core.services.typegen.kinds import ChildSchemaRef
from schematsgen.core.services.typegen.subdocuments import expand_subdocuments

LEAN = RenderContext(emit_document_variant=False)
DOCUMENT = RenderContext(emit_document_variant=True)


def _root_body(schema: Schema, ctx: RenderContext = LEAN) -> str:
    """Field lines of the root block only."""
    text = parse_schema(schema, model_name="User", ctx=ctx, header="<root>\n", footer="</root>")
    return text.split("<root>\n", 1)[1].removesuffix("</root>")


@pytest.fixture
def friend() -> Schema:
    return Schema({"name": str})


class TestExpandSubdocuments:
    def test_child_blocks_in_discovery_order(self, friend: Schema):
        parent = Schema({"friends": [friend], "bestFriend": {"type": friend, "required": True}})
        blocks, _ = expand_subdocuments(parent, model_name="User", ctx=LEAN)
        assert [b.name for b in blocks] == ["UserFriend", "UserBestFriend"]

    def test_paths_replaced_in_place(self, friend: Schema):
        parent = Schema({
            "friends": [friend],
            "bestFriend": {"type": friend, "required": True},
            "title": str,
        })
        _, tree = expand_subdocuments(parent, model_name="User", ctx=LEAN)
        assert list(tree) == ["friends", "bestFriend", "title", "_id", "id", "__v"]
        assert tree["friends"] == [ChildSchemaRef(name="UserFriend", schema=friend, is_array=True)]
        assert tree["bestFriend"] == ChildSchemaRef(name="UserBestFriend", schema=friend, required=True)

    def test_parent_tree_untouched(self, friend: Schema):
        parent = Schema({"friends": [friend]})
        expand_subdocuments(parent, model_name="User", ctx=LEAN)
        assert parent.tree["friends"] == [friend]

    def test_lean_child_block(self, friend: Schema):
        blocks, _ = expand_subdocuments(Schema({"friends": [friend]}), model_name="User", ctx=LEAN)
        assert blocks[0].text.endswith(
            "export type UserFriend = {\nname?: string;\n_id: mongoose.Types.ObjectId;\n}\n\n"
        )
        assert "Lean version of UserFriendDocument" in blocks[0].text

    def test_document_child_headers(self, friend: Schema):
        parent = Schema({"friends": [friend], "bestFriend": friend})
        blocks, _ = expand_subdocuments(parent, model_name="User", ctx=DOCUMENT)
        assert "export type UserFriendDocument = mongoose.Types.Subdocument & {\n" in blocks[0].text
        assert 'Type of `UserDocument["friends"]` element.' in blocks[0].text
        assert (
            "export type UserBestFriendDocument = mongoose.Document<mongoose.Types.ObjectId> & {\n"
            in blocks[1].text
        )

    def test_child_without_id(self):
        child = Schema({"name": str}, options={"_id": False})
        blocks, _ = expand_subdocuments(Schema({"owner": child}), model_name="Pet", ctx=DOCUMENT)
        assert "export type PetOwnerDocument = mongoose.Document<never> & {\n" in blocks[0].text


class TestHoistedFields:
    def test_lean_parent_fields(self, friend: Schema):
        parent = Schema({"friends": [friend], "bestFriend": {"type": friend, "required": True}, "title": str})
        assert _root_body(parent) == (
            "friends: UserFriend[];\n"
            "bestFriend: UserBestFriend;\n"
            "title?: string;\n"
            "_id: mongoose.Types.ObjectId;\n"
        )

    def test_document_parent_fields(self, friend: Schema):
        parent = Schema({"friends": [friend], "bestFriend": {"type": friend, "required": True}})
        assert _root_body(parent, DOCUMENT) == (
            "friends: mongoose.Types.DocumentArray<UserFriendDocument>;\n"
            "bestFriend: UserBestFriendDocument;\n"
            "_id: mongoose.Types.ObjectId;\n"
        )

    def test_single_child_optional_unless_required(self):
        address = Schema({"city": str})
        assert _root_body(Schema({"address": address}, options={"_id": False})) == (
            "address?: UserAddress;\n"
        )

    def test_child_array_with_undefined_default(self, friend: Schema):
        parent = Schema({"friends": {"type": [friend], "default": None}}, options={"_id": False})
        assert _root_body(parent) == "friends?: UserFriend[];\n"

    def test_required_child_array(self, friend: Schema):
        parent = Schema({"friends": {"type": [friend], "required": True}}, options={"_id": False})
        assert _root_body(parent) == "friends: UserFriend[];\n"

    def test_child_under_nested_path(self):
        address = Schema({"city": str})
        parent = Schema({"profile": {"address": address, "bio": str}}, options={"_id": False})
        assert _root_body(parent) == "profile: {\naddress?: UserProfileAddress;\nbio?: string;\n};\n"

    def test_grandchildren_precede_children(self):
        pet = Schema({"species": str})
        friend = Schema({"pets": [pet]})
        blocks = compile_schema(Schema({"friends": [friend]}), "User")
        assert [b.name for b in blocks] == ["UserFriendPet", "UserFriend", "User"]

    def test_child_virtuals_follow_child_options(self):
        child = Schema({"first": str}, options={"to_object": {"virtuals": True}})
        child.virtual("label")
        blocks, _ = expand_subdocuments(Schema({"item": child}), model_name="Order", ctx=LEAN)
        assert "label: any;\n" in blocks[0].text


class TestCycles:
    def test_self_embedding_schema(self):
        node = Schema({"name": str})
        node.add({"children": [node]})
        with pytest.raises(CircularSchemaError):
            compile_schema(node, "Node")

    def test_mutually_embedding_schemas(self):
        a = Schema({"x": str})
        b = Schema({"a": a})
        a.add({"b": b})
        with pytest.raises(CircularSchemaError):
            expand_subdocuments(a, model_name="A", ctx=LEAN)

    def test_shared_child_is_not_a_cycle(self, friend: Schema):
        parent = Schema({"friends": [friend], "bestFriend": friend})
        blocks = compile_schema(parent, "User")
        assert [b.name for b in blocks] == ["UserFriend", "UserBestFriend", "User"]
