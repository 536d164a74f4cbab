"""Game configuration models.

One pydantic model per mini-game type. Field aliases follow the camelCase keys
used in the show's config files.
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import ConfigLoadError


GameType = Literal[
    "simple-quiz",
    "guessing-game",
    "final-quiz",
    "audio-guess",
    "image-game",
    "four-statements",
    "fact-or-fake",
    "quizjagd",
]


# ── Question models ──


class SimpleQuizQuestion(BaseModel):
    question: str
    answer: str = ""
    answer_image: Optional[str] = Field(default=None, alias="answerImage")
    answer_audio: Optional[str] = Field(default=None, alias="answerAudio")
    answer_list: Optional[list[str]] = Field(default=None, alias="answerList")
    question_image: Optional[str] = Field(default=None, alias="questionImage")
    question_audio: Optional[str] = Field(default=None, alias="questionAudio")
    replace_image: bool = Field(default=False, alias="replaceImage")
    timer: Optional[int] = None

    model_config = {"populate_by_name": True}


class GuessingGameQuestion(BaseModel):
    question: str
    answer: float
    answer_image: Optional[str] = Field(default=None, alias="answerImage")

    model_config = {"populate_by_name": True}


class FinalQuizQuestion(BaseModel):
    question: str
    answer: str = ""
    answer_image: Optional[str] = Field(default=None, alias="answerImage")

    model_config = {"populate_by_name": True}


class AudioGuessQuestion(BaseModel):
    folder: str
    audio_file: str = Field(alias="audioFile")
    answer: str
    is_example: bool = Field(default=False, alias="isExample")

    model_config = {"populate_by_name": True}

    @property
    def long_audio_file(self) -> str:
        """Full-length variant of the clip (``short.*`` -> ``long.*``)."""
        if self.audio_file.startswith("short."):
            return "long." + self.audio_file[len("short."):]
        return self.audio_file


class ImageGameQuestion(BaseModel):
    image: str
    answer: str
    is_example: bool = Field(default=False, alias="isExample")

    model_config = {"populate_by_name": True}


class FourStatementsQuestion(BaseModel):
    question: str = Field(alias="Frage")
    true_statements: list[str] = Field(alias="trueStatements")
    wrong_statement: str = Field(alias="wrongStatement")

    model_config = {"populate_by_name": True}


class FactOrFakeQuestion(BaseModel):
    statement: str
    answer: Optional[Literal["FAKT", "FAKE"]] = None
    is_fact: Optional[bool] = Field(default=None, alias="isFact")
    description: str = ""

    model_config = {"populate_by_name": True}

    @property
    def verdict(self) -> str:
        """'FAKT' or 'FAKE', preferring the explicit answer over isFact."""
        if self.answer:
            return self.answer
        return "FAKT" if self.is_fact else "FAKE"


class QuizjagdQuestion(BaseModel):
    question: str
    answer: str
    is_example: bool = Field(default=False, alias="isExample")

    model_config = {"populate_by_name": True}


class QuizjagdFlatQuestion(QuizjagdQuestion):
    difficulty: int

    @field_validator("difficulty")
    @classmethod
    def validate_difficulty(cls, v: int) -> int:
        if v not in (3, 5, 7):
            raise ValueError("difficulty must be 3, 5 or 7")
        return v


class QuizjagdQuestionSet(BaseModel):
    easy: list[QuizjagdQuestion] = Field(default_factory=list)
    medium: list[QuizjagdQuestion] = Field(default_factory=list)
    hard: list[QuizjagdQuestion] = Field(default_factory=list)


# ── Game config models ──


class BaseGameConfig(BaseModel):
    """Fields shared by every game type."""

    type: str
    title: str = ""
    rules: Optional[list[str]] = None
    randomize_questions: bool = Field(default=False, alias="randomizeQuestions")

    model_config = {"populate_by_name": True}

    # Variants that always end in the SCORING phase.
    requires_scoring: ClassVar[bool] = False
    default_rules: ClassVar[list[str]] = []

    def rules_or_default(self) -> list[str]:
        return list(self.rules) if self.rules else list(self.default_rules)

    @property
    def total_questions(self) -> int:
        """Number of counted questions (the Example at index 0 excluded)."""
        questions = getattr(self, "questions", None) or []
        return max(len(questions) - 1, 0)


class SimpleQuizConfig(BaseGameConfig):
    type: Literal["simple-quiz"] = "simple-quiz"
    questions: list[SimpleQuizQuestion] = Field(default_factory=list)

    default_rules: ClassVar[list[str]] = ["Jede Frage wird gleichzeitig an die Teams gestellt."]


class GuessingGameConfig(BaseGameConfig):
    type: Literal["guessing-game"] = "guessing-game"
    questions: list[GuessingGameQuestion] = Field(default_factory=list)

    default_rules: ClassVar[list[str]] = ["Jedes Team gibt seinen Tipp ab."]


class FinalQuizConfig(BaseGameConfig):
    type: Literal["final-quiz"] = "final-quiz"
    questions: list[FinalQuizQuestion] = Field(default_factory=list)

    requires_scoring: ClassVar[bool] = True
    default_rules: ClassVar[list[str]] = ["Beide Teams setzen Punkte und beantworten die Frage."]


class AudioGuessConfig(BaseGameConfig):
    type: Literal["audio-guess"] = "audio-guess"
    questions: list[AudioGuessQuestion] = Field(default_factory=list)

    default_rules: ClassVar[list[str]] = ["Erkennt den Song anhand eines kurzen Ausschnittes."]


class ImageGameConfig(BaseGameConfig):
    type: Literal["image-game"] = "image-game"
    questions: list[ImageGameQuestion] = Field(default_factory=list)

    default_rules: ClassVar[list[str]] = ["Erkennt, was auf dem Bild zu sehen ist."]


class FourStatementsConfig(BaseGameConfig):
    type: Literal["four-statements"] = "four-statements"
    questions: list[FourStatementsQuestion] = Field(default_factory=list)

    default_rules: ClassVar[list[str]] = ["Findet die falsche Aussage."]


class FactOrFakeConfig(BaseGameConfig):
    type: Literal["fact-or-fake"] = "fact-or-fake"
    questions: list[FactOrFakeQuestion] = Field(default_factory=list)

    default_rules: ClassVar[list[str]] = ["Ist es FAKT oder FAKE?"]


class QuizjagdConfig(BaseGameConfig):
    type: Literal["quizjagd"] = "quizjagd"
    questions: Union[QuizjagdQuestionSet, list[QuizjagdFlatQuestion]] = Field(
        default_factory=QuizjagdQuestionSet
    )
    questions_per_team: int = Field(default=10, alias="questionsPerTeam")
    example_question: Optional[QuizjagdQuestion] = Field(default=None, alias="exampleQuestion")

    requires_scoring: ClassVar[bool] = True
    default_rules: ClassVar[list[str]] = ["Teams wählen abwechselnd die Schwierigkeit der Frage."]

    @field_validator("questions_per_team")
    @classmethod
    def validate_questions_per_team(cls, v: int) -> int:
        if v < 1:
            raise ValueError("questionsPerTeam must be at least 1")
        return v

    @property
    def total_questions(self) -> int:
        return self.questions_per_team * 2


GameConfig = Union[
    SimpleQuizConfig,
    GuessingGameConfig,
    FinalQuizConfig,
    AudioGuessConfig,
    ImageGameConfig,
    FourStatementsConfig,
    FactOrFakeConfig,
    QuizjagdConfig,
]

GAME_CONFIG_MODELS: dict[str, type[BaseGameConfig]] = {
    "simple-quiz": SimpleQuizConfig,
    "guessing-game": GuessingGameConfig,
    "final-quiz": FinalQuizConfig,
    "audio-guess": AudioGuessConfig,
    "image-game": ImageGameConfig,
    "four-statements": FourStatementsConfig,
    "fact-or-fake": FactOrFakeConfig,
    "quizjagd": QuizjagdConfig,
}


def parse_game_config(data: Any) -> GameConfig:
    """Validate a raw game config dict into its typed model.

    Raises:
        ConfigLoadError: if the type tag is unknown or validation fails.
    """
    if isinstance(data, BaseGameConfig):
        return data  # type: ignore[return-value]
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Game config must be an object, got {type(data).__name__}")

    game_type = str(data.get("type") or "")
    model = GAME_CONFIG_MODELS.get(game_type)
    if model is None:
        raise ConfigLoadError(f"Unknown game type: {game_type!r}")

    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid {game_type} config: {exc}") from exc
