"""Credit improvement plan pipeline"""

import logging
from datetime import datetime
from typing import List, Protocol, runtime_checkable
from credit_health.domain.context import build_financial_context
from credit_health.domain.models import Account, Budget, CreditAssessment, ImprovementPlan, Transaction
from credit_health.domain.plan_parser import parse_improvement_plan
from credit_health.domain.prompts import SYSTEM_INSTRUCTION, build_plan_prompt


@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns a system instruction and prompt into raw text"""

    async def complete(self, system_instruction: str, user_prompt: str) -> str | None: ...


async def generate_plan(
    assessment: CreditAssessment,
    accounts: List[Account],
    budgets: List[Budget],
    transactions: List[Transaction],
    text_client: TextGenerator,
    now: datetime | None = None,
) -> ImprovementPlan:
    """
    Main entry point: build context and prompt, call the generator, parse.

    Flow:
    1. Summarize balances, budgets and trailing 30-day spending
    2. Render the prompt with every assessment and context field
    3. Single request to the text generation service (no retries here)
    4. Strictly parse the response into an ImprovementPlan

    Raises:
        ExternalServiceError: Service unreachable, timed out or errored
        PlanParseError: Response empty or not a valid plan
    """
    context = build_financial_context(accounts, budgets, transactions, now=now)
    prompt = build_plan_prompt(assessment, context)

    content = await text_client.complete(SYSTEM_INSTRUCTION, prompt)
    logging.debug("Plan response received", extra={"content_length": len(content or "")})

    return parse_improvement_plan(content)
