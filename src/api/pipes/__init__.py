"""Request pipes: FastAPI dependencies that validate and reshape bodies."""

from src.api.pipes.body_input_post import BodyInputPostPipe

__all__ = ["BodyInputPostPipe"]
