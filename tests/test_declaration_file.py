"""
Tests for declaration file assembly.
"""

from pathlib import Path

import pytest

from schematsgen.core.models import GeneratedFile
from schematsgen.core.services.generators.declaration_file import generate_declaration_file
from schematsgen.core.services.schema_loader import load_schemas
from schematsgen.core.services.typegen import compile_schema


@pytest.fixture
def schemas(models_dir: Path) -> dict:
    return load_schemas([models_dir / "user.py", models_dir / "settings_model.py"])


def _generate(schemas: dict, *, no_mongoose: bool = False) -> GeneratedFile:
    compiled = {
        name: compile_schema(schema, name, suppress_orm_wrapper_types=no_mongoose)
        for name, schema in schemas.items()
    }
    return generate_declaration_file(
        compiled, schemas, output_path="types/mongoose.gen.ts", no_mongoose=no_mongoose,
    )


class TestMongooseDeclarations:
    def test_file_metadata(self, schemas):
        result = _generate(schemas)
        assert result.path == "types/mongoose.gen.ts"
        assert result.overwrite is True
        assert "2 model(s)" in result.reason

    def test_module_augmentation(self, schemas):
        content = _generate(schemas).content
        assert content.startswith("/* tslint:disable */\n/* eslint-disable */\n")
        assert 'import mongoose from "mongoose";\n\ndeclare module "mongoose" {\n' in content
        assert content.endswith("}\n")

    def test_section_order(self, schemas):
        content = _generate(schemas).content
        positions = [
            content.index("export type UserFriend = {"),
            content.index("export type User = {"),
            content.index("export type UserObject = User\n"),
            content.index("export type UserQuery = "),
            content.index("export type UserFriendDocument = "),
            content.index("export type UserDocument = "),
            content.index("export type Settings = {"),
        ]
        assert positions == sorted(positions)

    def test_function_types(self, schemas):
        content = _generate(schemas).content
        assert "isMetadataString: (this: UserDocument, ...args: any[]) => any;\n" in content
        assert "getFriends: (this: UserModel, ...args: any[]) => any;\n" in content
        assert "populateFriends: (this: UserQuery, ...args: any[]) => UserQuery;\n" in content
        assert "initializeTimestamps" not in content

    def test_model_and_schema_types(self, schemas):
        content = _generate(schemas).content
        assert "export type UserModel = mongoose.Model<UserDocument, UserQueries> & UserStatics\n" in content
        assert (
            "export type UserSchema = mongoose.Schema<UserDocument, UserModel, UserMethods, UserQueries>\n"
            in content
        )

    def test_models_without_functions(self, schemas):
        content = _generate(schemas).content
        assert "export type SettingsMethods = {\n}\n" in content
        assert 'theme: "light" | "dark";\n' in content


class TestPlainDeclarations:
    def test_no_mongoose(self, schemas):
        content = _generate(schemas, no_mongoose=True).content
        assert "mongoose" not in content
        assert "declare module" not in content
        assert "export type UserObject = User\n" in content
        assert "_id: string;\n" in content

    def test_no_document_types(self, schemas):
        content = _generate(schemas, no_mongoose=True).content
        assert "UserDocument =" not in content
        assert "UserQueries" not in content
