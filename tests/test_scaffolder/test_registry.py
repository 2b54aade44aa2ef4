"""Tests for services registry editing (expressos.scaffolder.registry)."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from expressos.errors import FilesystemError, RegistryFormatError
from expressos.scaffolder.registry import ServicesRegistry, patch_registry

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParse:
    def test_typescript_round_trip(self, ts_registry_source: str):
        doc = ServicesRegistry.parse(ts_registry_source, typescript=True)
        assert doc.prologue == ["// Services container", ""]
        assert doc.imports == []
        assert doc.opener == "export const services = {"
        assert [e.key for e in doc.entries] == [None, "logger"]
        assert doc.render() == ts_registry_source

    def test_javascript_round_trip(self, js_registry_source: str):
        doc = ServicesRegistry.parse(js_registry_source, typescript=False)
        assert doc.opener == "const services = {"
        assert doc.has_property("logger")
        assert doc.render() == js_registry_source

    def test_reads_existing_imports(self):
        source = textwrap.dedent("""\
            import { userService } from './user';
            import { a, b } from "./pair";

            export const services = {
              user: userService,
              a,
            };
        """)
        doc = ServicesRegistry.parse(source, typescript=True)
        assert doc.has_binding("userService")
        assert doc.has_binding("b")
        assert doc.has_property("user")
        assert doc.has_property("a")

    def test_require_imports(self):
        source = textwrap.dedent("""\
            const { billingService } = require('./billing');

            const services = {
              billing: billingService,
            };

            module.exports = { services };
        """)
        doc = ServicesRegistry.parse(source, typescript=False)
        assert doc.imports[0].module == "./billing"
        assert doc.has_binding("billingService")

    def test_braces_inside_strings_are_ignored(self):
        source = textwrap.dedent("""\
            export const services = {
              greeting: { text: '}}' },
              other: 1,
            };
        """)
        doc = ServicesRegistry.parse(source, typescript=True)
        assert [e.key for e in doc.entries] == ["greeting", "other"]

    def test_no_services_object(self):
        with pytest.raises(RegistryFormatError, match="no `services` object"):
            ServicesRegistry.parse("export default {};\n", typescript=True)

    def test_never_closed(self):
        source = "export const services = {\n  logger: console,\n"
        with pytest.raises(RegistryFormatError, match="never closed"):
            ServicesRegistry.parse(source, typescript=True)

    def test_method_and_quoted_members(self):
        source = textwrap.dedent("""\
            export const services = {
              logger() {
                return console;
              },
              async cache() {
                return null;
              },
              'legacy-mailer': mailer,
              [dynamicKey]: 1,
            };
        """)
        doc = ServicesRegistry.parse(source, typescript=True)
        assert [e.key for e in doc.entries] == ["logger", "cache", "legacy-mailer", None]
        assert doc.has_property("legacy-mailer")
        assert doc.render() == source

    def test_multiline_import_is_one_binding(self):
        source = textwrap.dedent("""\
            // Services container
            import {
              userService,
              auditService as audit,
            } from './user';

            export const services = {
              user: userService,
            };
        """)
        doc = ServicesRegistry.parse(source, typescript=True)
        assert len(doc.imports) == 1
        assert doc.imports[0].names == ("userService", "audit")
        assert doc.imports[0].module == "./user"
        assert doc.render() == source

    def test_error_names_the_file(self, tmp_path: Path):
        path = tmp_path / "services.ts"
        with pytest.raises(RegistryFormatError) as excinfo:
            ServicesRegistry.parse("nothing here\n", typescript=True, path=path)
        assert excinfo.value.path == path
        assert str(path) in str(excinfo.value)


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------


class TestMutation:
    def test_add_to_typescript_registry(self, ts_registry_source: str):
        doc = ServicesRegistry.parse(ts_registry_source, typescript=True)
        assert doc.add_import("userService", "./user") is True
        assert doc.add_property("user", "userService") is True

        assert doc.render() == textwrap.dedent("""\
            // Services container
            import { userService } from './user';

            export const services = {
              // Add your services here
              logger: {
                info: (message: string) => console.log(message),
                error: (message: string) => console.error(message),
              },
              user: userService,
            };

            export type Services = typeof services;
        """)

    def test_add_to_javascript_registry(self, js_registry_source: str):
        doc = ServicesRegistry.parse(js_registry_source, typescript=False)
        doc.add_import("userService", "./user")
        doc.add_property("user", "userService")
        text = doc.render()
        assert "const { userService } = require('./user');" in text
        assert "  user: userService,\n};" in text
        assert text.endswith("module.exports = { services };\n")

    def test_adds_are_idempotent(self, ts_registry_source: str):
        doc = ServicesRegistry.parse(ts_registry_source, typescript=True)
        doc.add_import("userService", "./user")
        doc.add_property("user", "userService")
        once = doc.render()

        again = ServicesRegistry.parse(once, typescript=True)
        assert again.add_import("userService", "./user") is False
        assert again.add_property("user", "userService") is False
        assert again.render() == once

    def test_trailing_comma_added_to_previous_entry(self):
        source = "export const services = {\n  logger: console\n};\n"
        doc = ServicesRegistry.parse(source, typescript=True)
        doc.add_property("user", "userService")
        assert doc.render() == (
            "export const services = {\n  logger: console,\n  user: userService,\n};\n"
        )

    def test_trailing_comma_skips_comments_and_targets_spread(self):
        source = textwrap.dedent("""\
            export const services = {
              ...baseServices
              // more below
            };
        """)
        doc = ServicesRegistry.parse(source, typescript=True)
        doc.add_property("user", "userService")
        assert "  ...baseServices,\n  // more below\n  user: userService,\n" in doc.render()

    def test_empty_object(self):
        doc = ServicesRegistry.parse("export const services = {\n};\n", typescript=True)
        doc.add_property("user", "userService")
        assert doc.render() == "export const services = {\n  user: userService,\n};\n"

    def test_multiline_import_not_duplicated(self):
        source = textwrap.dedent("""\
            // c
            import {
              userService,
            } from './user';

            export const services = {
              user: userService,
            };
        """)
        doc = ServicesRegistry.parse(source, typescript=True)
        assert doc.add_import("userService", "./user") is False
        assert doc.render() == source

    def test_prologue_order_and_blank_lines_kept(self):
        source = textwrap.dedent("""\
            /**
             * Services container
             */
            import { userService } from './user';


            import config from '../configs';
            const timeoutMs = config.timeoutMs;

            export const services = {
              user: userService,
            };
        """)
        doc = ServicesRegistry.parse(source, typescript=True)
        doc.add_import("billingService", "./billing")

        assert doc.render() == source.replace(
            "import { userService } from './user';\n",
            "import { userService } from './user';\n"
            "import { billingService } from './billing';\n",
        )

    def test_import_without_header_gets_blank_line(self):
        doc = ServicesRegistry.parse("export const services = {\n};\n", typescript=False)
        doc.add_import("userService", "./user")
        assert doc.render().startswith(
            "const { userService } = require('./user');\n\nexport const services = {"
        )


# ---------------------------------------------------------------------------
# patch_registry
# ---------------------------------------------------------------------------


class TestPatchRegistry:
    def test_patches_file_once(self, tmp_path: Path, ts_registry_source: str):
        path = tmp_path / "services.ts"
        path.write_text(ts_registry_source, encoding="utf-8")

        assert patch_registry(path, "userProfile", typescript=True) is True
        first = path.read_text(encoding="utf-8")
        assert "import { userProfileService } from './userProfile';" in first
        assert "  userProfile: userProfileService," in first

        assert patch_registry(path, "userProfile", typescript=True) is False
        assert path.read_text(encoding="utf-8") == first

    def test_two_services_accumulate(self, tmp_path: Path, js_registry_source: str):
        path = tmp_path / "services.js"
        path.write_text(js_registry_source, encoding="utf-8")
        patch_registry(path, "billing", typescript=False)
        patch_registry(path, "email", typescript=False)

        text = path.read_text(encoding="utf-8")
        assert text.index("require('./billing')") < text.index("require('./email')")
        assert text.index("billing: billingService") < text.index("email: emailService")

    def test_malformed_file_left_untouched(self, tmp_path: Path):
        path = tmp_path / "services.ts"
        path.write_text("export default {};\n", encoding="utf-8")
        with pytest.raises(RegistryFormatError):
            patch_registry(path, "user", typescript=True)
        assert path.read_text(encoding="utf-8") == "export default {};\n"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FilesystemError) as excinfo:
            patch_registry(tmp_path / "services.ts", "user", typescript=True)
        assert excinfo.value.kind == FilesystemError.NOT_FOUND

    def test_method_members_do_not_block_patch(self, tmp_path: Path):
        path = tmp_path / "services.ts"
        path.write_text(
            "export const services = {\n  logger() {\n    return console;\n  }\n};\n",
            encoding="utf-8",
        )
        assert patch_registry(path, "user", typescript=True) is True
        assert path.read_text(encoding="utf-8") == (
            "import { userService } from './user';\n"
            "\n"
            "export const services = {\n"
            "  logger() {\n"
            "    return console;\n"
            "  },\n"
            "  user: userService,\n"
            "};\n"
        )
