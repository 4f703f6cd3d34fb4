import unittest

from aiohttp import web
from aiohttp.test_utils import TestServer

from agent.config import ApiConfig
from agent.exceptions import ReasoningApiError, ReasoningConnectionError
from agent.models import ChatCompletionClient

TOOLS = [{
    "type": "function",
    "function": {"name": "wait", "description": "Wait", "parameters": {"type": "object"}},
}]


class TestChatCompletionClient(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.requests = []
        self.reply = (200, {
            "choices": [{
                "message": {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [{
                        "id": "call_1",
                        "type": "function",
                        "function": {"name": "wait", "arguments": "{\"ms\": 10}"},
                    }],
                },
                "finish_reason": "tool_calls",
            }],
            "usage": {"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15},
        })

        async def handler(request):
            self.requests.append({
                "path": request.path,
                "auth": request.headers.get("Authorization"),
                "body": await request.json(),
            })
            status, body = self.reply
            if isinstance(body, str):
                return web.Response(status=status, text=body)
            return web.json_response(body, status=status)

        app = web.Application()
        app.router.add_post("/v1/chat/completions", handler)
        self.server = TestServer(app)
        await self.server.start_server()
        api = ApiConfig(endpoint=str(self.server.make_url("/v1/")), api_key="sk-test", model="test-model")
        self.client = ChatCompletionClient(api, connect_timeout=2.0, read_timeout=5.0)

    async def asyncTearDown(self):
        await self.server.close()

    async def test_request_shape_with_tools(self):
        messages = [{"role": "user", "content": "hi"}]

        response = await self.client.chat_completion(messages, TOOLS)

        request = self.requests[0]
        self.assertEqual(request["path"], "/v1/chat/completions")
        self.assertEqual(request["auth"], "Bearer sk-test")
        body = request["body"]
        self.assertEqual(body["model"], "test-model")
        self.assertEqual(body["messages"], messages)
        self.assertEqual(body["tools"], TOOLS)
        self.assertEqual(body["tool_choice"], "auto")
        self.assertEqual(body["max_tokens"], 4096)
        self.assertEqual(body["temperature"], 0.7)

        self.assertIsNone(response.content)
        self.assertEqual(response.finish_reason, "tool_calls")
        self.assertEqual(response.tool_calls[0].id, "call_1")
        self.assertEqual(response.tool_calls[0].name, "wait")
        self.assertEqual(response.tool_calls[0].arguments, "{\"ms\": 10}")
        self.assertEqual(response.usage.total_tokens, 15)

    async def test_no_tools_omits_tool_choice(self):
        self.reply = (200, {"choices": [{"message": {"content": "hello"}, "finish_reason": "stop"}]})

        response = await self.client.chat_completion([{"role": "user", "content": "hi"}])

        body = self.requests[0]["body"]
        self.assertNotIn("tools", body)
        self.assertNotIn("tool_choice", body)
        self.assertEqual(response.content, "hello")
        self.assertEqual(response.tool_calls, [])
        self.assertIsNone(response.usage)

    async def test_error_status(self):
        self.reply = (401, "invalid api key")

        with self.assertRaises(ReasoningApiError) as ctx:
            await self.client.chat_completion([{"role": "user", "content": "hi"}])

        self.assertEqual(ctx.exception.status, 401)
        self.assertEqual(ctx.exception.body, "invalid api key")
        self.assertIn("invalid api key", str(ctx.exception))
        self.assertEqual(len(self.requests), 1)

    async def test_empty_choices(self):
        self.reply = (200, {"choices": []})

        with self.assertRaises(ReasoningApiError) as ctx:
            await self.client.chat_completion([{"role": "user", "content": "hi"}])
        self.assertEqual(str(ctx.exception), "No response from API")

    async def test_test_connection(self):
        self.reply = (200, {"choices": [{"message": {"content": "Hello"}}]})

        reply = await self.client.test_connection()

        self.assertEqual(reply, "Hello")
        body = self.requests[0]["body"]
        self.assertEqual(body["max_tokens"], 10)
        self.assertNotIn("tools", body)

    async def test_unreachable_endpoint(self):
        client = ChatCompletionClient(
            ApiConfig(endpoint="http://127.0.0.1:1/v1", api_key="k"), connect_timeout=1.0
        )
        with self.assertRaises(ReasoningConnectionError):
            await client.chat_completion([{"role": "user", "content": "hi"}])


class TestParseResponse(unittest.TestCase):
    def test_decoded_and_missing_arguments(self):
        response = ChatCompletionClient.parse_response({
            "choices": [{
                "message": {
                    "tool_calls": [
                        {"id": "a", "function": {"name": "mouse_move", "arguments": {"x": 1, "y": 2}}},
                        {"id": "b", "function": {"name": "get_screen_update"}},
                    ]
                }
            }]
        })
        self.assertEqual(response.tool_calls[0].arguments, '{"x": 1, "y": 2}')
        self.assertEqual(response.tool_calls[1].arguments, "{}")

    def test_url_joins_endpoint(self):
        client = ChatCompletionClient(ApiConfig(endpoint="https://example.com/v1/"))
        self.assertEqual(client.url, "https://example.com/v1/chat/completions")
