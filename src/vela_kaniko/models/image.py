from pydantic import BaseModel, Field

from vela_kaniko.errors import MissingFieldError


class ImageInfo(BaseModel):
    """Параметры образа на время сборки.

    build_args — переменные для Dockerfile в формате KEY=VALUE
    context — путь к контексту сборки
    dockerfile — путь к Dockerfile
    target — стадия multi-stage сборки (необязательно)
    custom_platform — платформа, например linux/arm64 (необязательно)
    """

    build_args: list[str] = Field(default_factory=list)
    context: str = "."
    dockerfile: str = "Dockerfile"
    target: str | None = None
    force_build_metadata: bool = False
    custom_platform: str | None = None

    def validate_config(self) -> None:
        if not self.context:
            raise MissingFieldError("no image context provided", field="image.context")

        if not self.dockerfile:
            raise MissingFieldError("no image dockerfile provided", field="image.dockerfile")
