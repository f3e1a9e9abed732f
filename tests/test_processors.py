"""Tests for the inlining pre-processor and the import stripper."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cssinline.processors import CssImportInliner, CssImportStripper, strip_imports
from cssinline.resources import Group, Resource, ResourceType
from tests.stubs import make_resolver


def css(uri: str) -> Resource:
    return Resource.create(uri, ResourceType.CSS)


class TestCssImportStripper(unittest.TestCase):
    def test_removes_statement_keeping_surroundings(self):
        self.assertEqual(strip_imports("a{} @import url('x.css'); b{}"), "a{}  b{}")

    def test_no_imports_is_noop(self):
        text = "body {\n  margin: 0;\n}\n"
        self.assertEqual(CssImportStripper().process(text), text)

    def test_is_idempotent(self):
        text = "@IMPORT URL(a.css)\n@import url(\"b.css\");\n.c { color: blue; }"
        once = strip_imports(text)
        self.assertEqual(once, "\n\n.c { color: blue; }")
        self.assertEqual(strip_imports(once), once)

    def test_malformed_statement_is_left_alone(self):
        text = "@import url('broken.css';\n.a {}"
        self.assertEqual(strip_imports(text), text)

    def test_unclosed_statement_keeps_following_rules(self):
        text = "@import url(broken.css;\n.b { background: url(x.png) }\n@import url(ok.css);"
        self.assertEqual(
            strip_imports(text),
            "@import url(broken.css;\n.b { background: url(x.png) }\n",
        )


class TestCssImportInliner(unittest.TestCase):
    def setUp(self):
        self.files = {
            "/css/main.css": "@import url(b.css);\n.main {}",
            "/css/b.css": "@import url(c.css);\n.b {}",
            "/css/c.css": ".c {}",
            "/css/other.css": "@import url(c.css);\n@import url(d.css);\n.other {}",
            "/css/d.css": ".d {}",
        }
        self.inliner = CssImportInliner(make_resolver(self.files))

    def test_inserts_dependencies_before_root(self):
        group = Group("all", [css("/css/first.css"), css("/css/main.css"), css("/css/last.css")])
        output = self.inliner.process(css("/css/main.css"), self.files["/css/main.css"], group)

        self.assertEqual(output, self.files["/css/main.css"])
        self.assertEqual(
            group.resources,
            [
                css("/css/first.css"),
                css("/css/c.css"),
                css("/css/b.css"),
                css("/css/main.css"),
                css("/css/last.css"),
            ],
        )

    def test_running_twice_inserts_nothing_new(self):
        group = Group("all", [css("/css/main.css")])
        self.inliner.process(css("/css/main.css"), self.files["/css/main.css"], group)
        snapshot = group.resources
        inserted = self.inliner.inline(css("/css/main.css"), group)

        self.assertEqual(inserted, [])
        self.assertEqual(group.resources, snapshot)

    def test_present_import_skips_only_itself(self):
        group = Group("all", [css("/css/main.css"), css("/css/other.css")])
        self.inliner.process(css("/css/main.css"), self.files["/css/main.css"], group)
        inserted = self.inliner.inline(css("/css/other.css"), group)

        self.assertEqual(inserted, [css("/css/d.css")])
        self.assertEqual(
            group.resources,
            [
                css("/css/c.css"),
                css("/css/b.css"),
                css("/css/main.css"),
                css("/css/d.css"),
                css("/css/other.css"),
            ],
        )

    def test_non_css_resources_pass_through(self):
        script = Resource.create("/js/app.js", ResourceType.JS)
        group = Group("all", [script])
        text = "// @import url(b.css);"

        self.assertEqual(self.inliner.process(script, text, group), text)
        self.assertEqual(group.resources, [script])


class TestGroup(unittest.TestCase):
    def test_append_ignores_duplicates(self):
        group = Group("g", [css("/a.css"), css("/a.css")])
        self.assertEqual(len(group), 1)

    def test_insert_before_unknown_resource_fails(self):
        group = Group("g", [css("/a.css")])
        with self.assertRaises(ValueError):
            group.insert_before(css("/missing.css"), css("/b.css"))

    def test_resources_of_type(self):
        script = Resource.create("/js/app.js", ResourceType.JS)
        group = Group("g", [css("/a.css"), script])
        self.assertEqual(group.resources_of_type(ResourceType.JS), [script])

    def test_resource_equality_by_uri_and_type(self):
        self.assertEqual(css("/a.css"), Resource("/a.css"))
        self.assertNotEqual(css("/a.css"), Resource.create("/a.css", ResourceType.JS))


if __name__ == "__main__":
    unittest.main()
