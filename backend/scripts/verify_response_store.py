import asyncio
import os
import sys
import uuid

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from app.core.config import load_settings
from app.services.provider_factory import build_services

SAMPLE_FORM_ID = "grade-4-math-quiz-ramanujan-day"


async def run(form_id: str = SAMPLE_FORM_ID) -> None:
    services = build_services(load_settings())
    services.init_storage()
    try:
        form = services.catalog.require_form(form_id)
        answers = {
            "participant_name": f"verify-{uuid.uuid4().hex[:8]}",
            "q1": "5",
            "q6": "c",
        }
        scoring = services.evaluator.evaluate(form, answers)
        result = await services.responses.persist(form_id, answers, scoring)
        responses = await services.responses.fetch_all(form_id)
        matches = [item for item in responses if item.id == result.response_id]

        print(
            "stored_in={status} response_id={response_id} score={score}/{max_score} found={found} total={total}".format(
                status=result.status.value,
                response_id=result.response_id,
                score=scoring.total_score,
                max_score=scoring.max_score,
                found=len(matches),
                total=len(responses),
            )
        )
    finally:
        await services.close()


def main() -> None:
    form_id = sys.argv[1] if len(sys.argv) > 1 else SAMPLE_FORM_ID
    asyncio.run(run(form_id))


if __name__ == "__main__":
    main()
