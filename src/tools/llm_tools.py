"""LLM chains and prompt templates for photo analysis.

The analysis chain turns a pet photo into a MatchProbe: species, likely
breeds, colors, size and visible features. The scorer treats the result as
an opaque oracle answer.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError
from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate

from src.models.probe import MatchProbe
from src.utils.errors import LLMError
from src.utils.logging_config import logger


class PetImageAnalysis(BaseModel):
    """Output schema for photo analysis."""

    species: str = Field(..., description="'dog' or 'cat'")
    breeds: list[str] = Field(
        default_factory=list, description="Candidate breeds, most likely first"
    )
    colors: list[str] = Field(
        default_factory=list, description="Single-word coat colors, lowercase"
    )
    size: str = Field(..., description="'small', 'medium' or 'large'")
    features: list[str] = Field(
        default_factory=list,
        description="Short visible features such as 'collar' or 'long fur'",
    )
    distinctive_marks: list[str] = Field(
        default_factory=list, description="Unusual markings, scars or patches"
    )
    confidence: float = Field(..., description="Overall confidence 0-1")

    def to_probe(self) -> MatchProbe:
        return MatchProbe(
            species=self.species,
            breeds=self.breeds,
            colors=self.colors,
            size=self.size,
            features=self.features,
            distinctive_marks=self.distinctive_marks,
            confidence=min(max(self.confidence, 0.0), 1.0),
        )


def get_image_analysis_chain(llm):
    """Chain describing the pet in a photo as structured JSON."""

    parser = JsonOutputParser(pydantic_object=PetImageAnalysis)
    prompt = ChatPromptTemplate.from_messages(
        [
            (
                "system",
                """You help reunite lost pets with their owners.
Describe only what is visible in the photo. Use lowercase single words for
colors and short phrases for features. If the animal is neither a dog nor a
cat, or the photo is unclear, report a low confidence.

{format_instructions}""",
            ),
            (
                "human",
                [
                    {"type": "text", "text": "Describe the pet in this photo."},
                    {"type": "image_url", "image_url": {"url": "{image_url}"}},
                ],
            ),
        ]
    ).partial(format_instructions=parser.get_format_instructions())

    return prompt | llm | parser


def analyze_pet_image(image_url: str, llm) -> MatchProbe:
    """Run photo analysis and validate the answer into a MatchProbe.

    Raises:
        LLMError: If the provider call fails or the answer does not fit the
            probe schema.
    """

    chain = get_image_analysis_chain(llm)
    try:
        result = chain.invoke({"image_url": image_url})
    except Exception as exc:
        log_llm_error("image_analysis", exc)
        raise LLMError(f"Photo analysis failed: {exc}") from exc

    try:
        return PetImageAnalysis.model_validate(result).to_probe()
    except ValidationError as exc:
        log_llm_error("image_analysis", exc)
        raise LLMError(f"Photo analysis returned unusable output: {exc}") from exc


def log_llm_error(context: str, exc: Exception) -> None:
    """Log LLM errors with context for easier debugging."""

    logger.warning("LLM error in %s: %s", context, str(exc))
