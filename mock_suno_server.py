import random
import uuid
from datetime import datetime
from typing import Dict, Optional

from aiohttp import web
from loguru import logger

SUBMIT_PATHS = (
    "/api/v1/generate",
    "/api/v1/generate/extend",
    "/api/v1/separate",
    "/api/v1/convert",
    "/api/v1/lyrics",
    "/api/v1/video",
    "/api/v1/vocals",
    "/api/v1/instrumental",
)


class SunoMockServer:
    """In-process stand-in for the Suno API.

    A task reports PENDING, then TEXT_SUCCESS, and finally ``final_status``
    once ``completion_time`` seconds have passed since submission.
    ``error_rate`` is the chance a status request fails with HTTP 500.
    """

    def __init__(
        self,
        api_key: str = "test-key",
        completion_time: float = 1.0,
        error_rate: float = 0.0,
        credits: float = 100,
        final_status: str = "SUCCESS",
        error_message: Optional[str] = None,
    ):
        self.api_key = api_key
        self.completion_time = completion_time
        self.error_rate = error_rate
        self.credits = credits
        self.final_status = final_status
        self.error_message = error_message
        self.tasks: Dict[str, dict] = {}
        self.runner: Optional[web.AppRunner] = None
        self.submissions = []
        self.status_requests = 0
        self.app = web.Application()
        for path in SUBMIT_PATHS:
            self.app.router.add_post(path, self.handle_submit)
        self.app.router.add_get("/api/v1/generate/record-info", self.handle_status)
        self.app.router.add_get("/api/v1/generate/credit", self.handle_credit)
        self.logger = logger

    def _authorized(self, request: web.Request) -> bool:
        return request.headers.get("Authorization") == f"Bearer {self.api_key}"

    @staticmethod
    def _unauthorized() -> web.Response:
        return web.json_response({"code": 401, "msg": "Invalid API key"}, status=401)

    async def handle_submit(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()

        body = await request.json()
        self.submissions.append((request.path, body))

        if self.credits <= 0:
            self.logger.info("Returning insufficient credits")
            return web.json_response(
                {"code": 429, "msg": "The current credits are insufficient"}
            )

        task_id = uuid.uuid4().hex
        self.tasks[task_id] = {"path": request.path, "created": datetime.now()}
        return web.json_response(
            {"code": 200, "msg": "success", "data": {"taskId": task_id}}
        )

    async def handle_status(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()

        self.status_requests += 1
        if random.random() < self.error_rate:
            self.logger.info("Returning error status")
            return web.json_response({"code": 500, "msg": "Server error"}, status=500)

        task_id = request.query.get("taskId", "")
        task = self.tasks.get(task_id)
        if task is None:
            return web.json_response(
                {"code": 404, "msg": "Task not found"}, status=404
            )

        elapsed = (datetime.now() - task["created"]).total_seconds()
        data = {"taskId": task_id, "status": "PENDING", "response": None}

        if elapsed >= self.completion_time:
            self.logger.info(f"Returning {self.final_status} for task {task_id}")
            data["status"] = self.final_status
            if self.final_status == "SUCCESS":
                data["response"] = self._result_for(task["path"], task_id)
            else:
                data["errorMessage"] = self.error_message
        elif elapsed >= self.completion_time / 2:
            data["status"] = "TEXT_SUCCESS"
        else:
            self.logger.info(f"Returning pending status (elapsed: {elapsed:.1f}s)")

        return web.json_response({"code": 200, "msg": "success", "data": data})

    async def handle_credit(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._unauthorized()
        return web.json_response({"code": 200, "msg": "success", "data": self.credits})

    @staticmethod
    def _result_for(path: str, task_id: str) -> dict:
        if path == "/api/v1/lyrics":
            return {
                "lyricsData": [
                    {"title": "Night Drive", "text": "[Verse]\nCity lights below"},
                ]
            }
        if path == "/api/v1/video":
            return {"videoUrl": f"https://cdn.example.com/{task_id}.mp4"}
        return {
            "sunoData": [
                {
                    "id": f"{task_id}-{n}",
                    "title": f"Track {n}",
                    "audioUrl": f"https://cdn.example.com/{task_id}-{n}.mp3",
                    "streamAudioUrl": f"https://cdn.example.com/{task_id}-{n}.stream",
                    "imageUrl": f"https://cdn.example.com/{task_id}-{n}.jpg",
                    "tags": "synthwave",
                    "duration": 120.5,
                }
                for n in (1, 2)
            ]
        }

    async def start(self, port: int = 8080):
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, "localhost", port)
        await site.start()
        self.logger.info(f"Mock Suno server started on port {port}")
        return site

    async def stop(self) -> None:
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
