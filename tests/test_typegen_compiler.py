"""
Tests for compile_schema — paired lean/document blocks for one model.
"""

import importlib.util
from pathlib import Path

import pytest

from schematsgen.core.models import GeneratedBlock, Schema, Types
from schematsgen.core.services.typegen import compile_schema


def _load_fixture(models_dir: Path, name: str):
    spec = importlib.util.spec_from_file_location(f"_fixture_{name}", models_dir / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def user_blocks(models_dir: Path) -> list[GeneratedBlock]:
    user = _load_fixture(models_dir, "user").User
    return compile_schema(user.schema, user.model_name)


class TestCompileSchema:
    def test_block_names(self, user_blocks):
        assert [b.name for b in user_blocks] == ["UserFriend", "User"]

    def test_lean_root_block(self, user_blocks):
        text = user_blocks[-1].lean_text
        assert text.endswith(
            "export type User = {\n"
            "email: string;\n"
            "firstName: string;\n"
            "lastName: string;\n"
            "metadata?: any;\n"
            "bestFriend?: mongoose.Types.ObjectId;\n"
            "friends: UserFriend[];\n"
            "city: {\n"
            "coordinates?: number[];\n"
            "};\n"
            "_id: mongoose.Types.ObjectId;\n"
            "}\n\n"
        )

    def test_document_root_block(self, user_blocks):
        text = user_blocks[-1].document_text
        assert (
            "export type UserDocument = mongoose.Document<mongoose.Types.ObjectId, UserQueries>"
            " & UserMethods & {\n" in text
        )
        assert "friends: mongoose.Types.DocumentArray<UserFriendDocument>;\n" in text
        assert "coordinates?: mongoose.Types.Array<number>;\n" in text
        assert "name: any;\n" in text
        assert "__v" not in text

    def test_lean_omits_virtuals_by_default(self, user_blocks):
        assert "name: any;" not in user_blocks[-1].lean_text

    def test_child_reference(self, user_blocks):
        friend = user_blocks[0]
        assert 'uid: User["_id"] | User;\n' in friend.lean_text
        assert 'uid: UserDocument["_id"] | UserDocument;\n' in friend.document_text

    def test_suppressed_wrappers(self, models_dir: Path):
        user = _load_fixture(models_dir, "user").User
        blocks = compile_schema(user.schema, "User", suppress_orm_wrapper_types=True)
        assert all(b.document_text is None for b in blocks)
        assert "_id: string;\n" in blocks[-1].lean_text
        assert "bestFriend?: string;\n" in blocks[-1].lean_text
        assert "uid: string | User;\n" in blocks[0].lean_text

    def test_lean_virtuals_from_options(self):
        schema = Schema({"first": str}, options={"to_object": {"getters": True}})
        schema.virtual("display")
        blocks = compile_schema(schema, "Profile")
        assert "display: any;\n" in blocks[0].lean_text

    def test_root_without_id(self):
        schema = Schema({"first": str}, options={"_id": False})
        blocks = compile_schema(schema, "Profile")
        assert "mongoose.Document<never, ProfileQueries> & ProfileMethods & {\n" in blocks[0].document_text

    def test_compilation_is_repeatable(self, models_dir: Path):
        user = _load_fixture(models_dir, "user").User
        assert compile_schema(user.schema, "User") == compile_schema(user.schema, "User")


class TestImplicitSubdocuments:
    """Arrays of plain objects compile like arrays of child schemas."""

    FRIEND = {"uid": {"type": Types.ObjectId, "ref": "User", "required": True}, "nickname": str}

    def test_array_of_objects_is_hoisted(self):
        blocks = compile_schema(Schema({"friends": [self.FRIEND]}), "User")
        assert [b.name for b in blocks] == ["UserFriend", "User"]
        assert "friends: UserFriend[];\n" in blocks[-1].lean_text
        assert "friends: mongoose.Types.DocumentArray<UserFriendDocument>;\n" in blocks[-1].document_text

    def test_hoisted_block_has_own_id(self):
        blocks = compile_schema(Schema({"friends": [self.FRIEND]}), "User")
        assert blocks[0].lean_text.endswith(
            "export type UserFriend = {\n"
            'uid: User["_id"] | User;\n'
            "nickname?: string;\n"
            "_id: mongoose.Types.ObjectId;\n"
            "}\n\n"
        )
        assert "export type UserFriendDocument = mongoose.Types.Subdocument & {\n" in blocks[0].document_text

    def test_typed_array_of_objects(self):
        blocks = compile_schema(Schema({"friends": {"type": [self.FRIEND], "default": None}}), "User")
        assert [b.name for b in blocks] == ["UserFriend", "User"]
        assert "friends?: UserFriend[];\n" in blocks[-1].lean_text
