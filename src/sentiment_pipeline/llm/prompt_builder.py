"""
Prompt builder for batch classification requests.

Responsible for:
- Rendering the system prompt from a Jinja2 template
- Truncating each post to the per-post character cap
- Concatenating posts with positional markers ("Post 1:", "Post 2:", ...)
- Constructing the complete LLMGenerationRequest with the response schema
"""

from pathlib import Path
from typing import Optional, Sequence

import structlog
from jinja2 import Environment, FileSystemLoader

from sentiment_pipeline.models.enums import Sentiment
from sentiment_pipeline.models.llm_models import LLMGenerationRequest
from sentiment_pipeline.validation.response_parser import batch_analysis_schema

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptBuilder:
    """
    Build one combined classification prompt for a batch of posts.

    The order of posts in the prompt is the order results are expected back
    in; reconciliation maps result ``i`` onto post ``i``.
    """

    def __init__(
        self,
        model: str,
        topic: str = "military aviation and fighter jets",
        content_char_limit: int = 1000,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        templates_dir: Optional[Path] = None,
    ):
        """
        Initialize prompt builder.

        Args:
            model: Model name sent with every request
            topic: Subject area named in the system prompt
            content_char_limit: Max characters of each post included in the prompt
            temperature: Sampling temperature
            max_tokens: Max tokens to generate
            templates_dir: Directory containing system_prompt.txt
        """
        self.model = model
        self.topic = topic
        self.content_char_limit = content_char_limit
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.templates_dir = Path(templates_dir or DEFAULT_TEMPLATES_DIR)

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # Prompts, not HTML
        )
        self.system_template = self.jinja_env.get_template("system_prompt.txt")
        self.json_schema = batch_analysis_schema()

        logger.info(
            "PromptBuilder initialized",
            model=model,
            content_char_limit=content_char_limit,
            templates_dir=str(self.templates_dir),
        )

    def build_system_prompt(self, post_count: int) -> str:
        """Render the system prompt asking for exactly ``post_count`` results."""
        return self.system_template.render(
            topic=self.topic,
            post_count=post_count,
            sentiments=[s.value for s in Sentiment],
        ).strip()

    def build_user_prompt(self, contents: Sequence[str]) -> str:
        """
        Concatenate posts with positional markers.

        Each block reads ``Post <n>:\\n<content>\\n---`` and blocks are
        separated by a blank line.
        """
        return "\n\n".join(
            f"Post {i + 1}:\n{content[:self.content_char_limit]}\n---"
            for i, content in enumerate(contents)
        )

    def build_request(self, contents: Sequence[str]) -> LLMGenerationRequest:
        """Build the complete LLMGenerationRequest for one batch."""
        system_prompt = self.build_system_prompt(len(contents))
        user_prompt = self.build_user_prompt(contents)

        logger.debug(
            "Batch prompt built",
            post_count=len(contents),
            system_prompt_length=len(system_prompt),
            user_prompt_length=len(user_prompt),
        )

        return LLMGenerationRequest(
            system_prompt=system_prompt,
            prompt=user_prompt,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            format_schema=self.json_schema,
        )
