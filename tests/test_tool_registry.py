import unittest
import tempfile
from pathlib import Path

from agent.response import ToolResult
from desktop.unsupported import UnsupportedDesktop
from tools.base_tool import Tool
from tools.defaults import build_guide_registry, build_main_registry
from tools.tool_registry import ToolRegistry

from fakes import RecordingDesktop, make_context


class ExplodingTool(Tool):
    name = "explode"
    description = "Always raises."

    async def execute(self, args, context):
        raise RuntimeError("kaboom")


class TestToolRegistry(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self._tmp.name)
        self.desktop = RecordingDesktop()
        self.context = make_context(self.tmp_path, desktop=self.desktop)
        self.registry = build_main_registry()

    def tearDown(self):
        self._tmp.cleanup()

    def test_main_registry_order(self):
        self.assertEqual(
            self.registry.tool_names,
            [
                "mouse_move",
                "mouse_click",
                "mouse_double_click",
                "keyboard_type",
                "keyboard_press",
                "get_screen_update",
                "wait",
                "scroll",
                "guide_search",
            ],
        )

    def test_tool_defs_shape(self):
        defs = self.registry.tool_defs()
        self.assertEqual(len(defs), 9)
        click = defs[1]
        self.assertEqual(click["type"], "function")
        self.assertEqual(click["function"]["name"], "mouse_click")
        self.assertEqual(click["function"]["parameters"]["required"], ["x", "y"])

    def test_guide_registry(self):
        self.assertEqual(
            build_guide_registry().tool_names, ["guide_ls", "guide_preview", "guide_read"]
        )

    def test_duplicate_name_rejected(self):
        with self.assertRaises(ValueError):
            ToolRegistry([ExplodingTool(), ExplodingTool()])

    async def test_mouse_click_default_button(self):
        result = await self.registry.execute("mouse_click", {"x": 10, "y": 20}, self.context)
        self.assertTrue(result.success)
        self.assertEqual(result.output, "Clicked left at (10, 20)")
        self.assertEqual(self.desktop.actions, [("click", 10, 20, "left", False)])

    async def test_unknown_tool(self):
        result = await self.registry.execute("nonexistent_tool", {}, self.context)
        self.assertFalse(result.success)
        self.assertTrue(result.text.startswith("Error:"))
        self.assertIn("Unknown tool", result.text)

    async def test_effector_outputs(self):
        cases = [
            ("mouse_move", {"x": 5, "y": 6}, "Moved mouse to (5, 6)"),
            ("mouse_click", {"x": 1, "y": 2, "button": "right"}, "Clicked right at (1, 2)"),
            ("mouse_double_click", {"x": 3, "y": 4}, "Double-clicked at (3, 4)"),
            ("keyboard_type", {"text": "hello"}, "Typed: hello"),
            ("keyboard_press", {"keys": ["ctrl", "c"]}, "Pressed: ctrl + c"),
            ("get_screen_update", {}, "Screen update requested"),
            ("wait", {"ms": 0}, "Waited 0ms"),
            ("scroll", {"direction": "down"}, "Scrolled down by 3"),
            ("scroll", {"direction": "up", "amount": 5}, "Scrolled up by 5"),
        ]
        for name, args, expected in cases:
            with self.subTest(tool=name, args=args):
                result = await self.registry.execute(name, args, self.context)
                self.assertEqual(result, ToolResult.ok(expected))

    async def test_desktop_receives_config_timings(self):
        await self.registry.execute("mouse_move", {"x": 1, "y": 1}, self.context)
        await self.registry.execute("keyboard_type", {"text": "a"}, self.context)
        self.assertEqual(self.desktop.actions[0], ("move", 1, 1, 300))
        self.assertEqual(self.desktop.actions[1], ("type", "a", 30))

    async def test_missing_argument(self):
        result = await self.registry.execute("mouse_click", {"x": 10}, self.context)
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Missing y")
        self.assertEqual(self.desktop.actions, [])

    async def test_invalid_argument_types(self):
        for args in ({"x": "10", "y": 20}, {"x": True, "y": 20}, {"x": 1.5, "y": 2}):
            with self.subTest(args=args):
                result = await self.registry.execute("mouse_move", args, self.context)
                self.assertFalse(result.success)
                self.assertIn("Invalid x", result.error)

    async def test_invalid_enum_and_minimum(self):
        result = await self.registry.execute(
            "mouse_click", {"x": 1, "y": 1, "button": "side"}, self.context
        )
        self.assertIn("Invalid button", result.error)
        result = await self.registry.execute("wait", {"ms": -5}, self.context)
        self.assertIn("Invalid ms", result.error)
        result = await self.registry.execute("keyboard_press", {"keys": ["ctrl", 3]}, self.context)
        self.assertFalse(result.success)

    async def test_empty_key_list(self):
        result = await self.registry.execute("keyboard_press", {"keys": []}, self.context)
        self.assertEqual(result.error, "Missing keys")

    async def test_tool_exception_becomes_failure(self):
        registry = ToolRegistry([ExplodingTool()])
        result = await registry.execute("explode", {}, self.context)
        self.assertFalse(result.success)
        self.assertEqual(result.text, "Error: kaboom")

    async def test_unsupported_desktop_fails_softly(self):
        context = make_context(self.tmp_path, desktop=UnsupportedDesktop("linux"))
        result = await self.registry.execute("mouse_move", {"x": 1, "y": 1}, context)
        self.assertFalse(result.success)
        self.assertIn("not supported", result.error)


class TestToolResult(unittest.TestCase):
    def test_output_and_error_are_exclusive(self):
        with self.assertRaises(ValueError):
            ToolResult(True, "x", "e")
        with self.assertRaises(ValueError):
            ToolResult(False, "x", "e")
        with self.assertRaises(ValueError):
            ToolResult(True, "")
        with self.assertRaises(ValueError):
            ToolResult(False)

    def test_empty_values_get_placeholders(self):
        self.assertEqual(ToolResult.ok("").output, "(no output)")
        self.assertEqual(ToolResult.fail("").error, "unknown error")
        self.assertEqual(ToolResult.fail("boom").text, "Error: boom")


class TestGuideReadEmpty(unittest.IsolatedAsyncioTestCase):
    async def test_empty_guide_reads_as_placeholder(self):
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            context = make_context(tmp_path)
            context.guide_store.save("applications/empty.md", "")

            result = await build_guide_registry().execute(
                "guide_read", {"file_path": "applications/empty.md"}, context
            )

        self.assertTrue(result.success)
        self.assertEqual(result.output, "(no output)")
        self.assertIsNone(result.error)
