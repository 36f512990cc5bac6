"""
Prompt templates for question generation, answer evaluation and the final
summary. Each template pins the output layout the parsers expect:
numbered "N. " items for questions, SCORE/STRENGTHS/IMPROVEMENTS/FEEDBACK
sections for evaluations.
"""
from typing import List


class Prompts:
    """Collection of all prompts. Templates are deterministic for a given input."""

    # ============================================================
    # QUESTION GENERATION
    # ============================================================

    @staticmethod
    def generate_questions(
        role: str,
        skills: List[str],
        experience: int,
        count: int = 10,
        coding: int = 4,
        theory: int = 6,
    ) -> str:
        """Prompt for the numbered question list."""
        skill_list = ", ".join(skills)
        format_lines = "\n".join(
            f"{n}. [TYPE: Coding/Theory] [DIFFICULTY] Skill Being Tested: Question"
            for n in range(1, count + 1)
        )

        return f"""Generate {count} technical interview questions for a {role} with {experience} year(s) experience.
Required skills: {skill_list}

Guidelines:
- {coding} must be coding questions with real-world coding tasks.
- {theory} must be theoretical questions testing knowledge and concepts.
- Match the {experience} year(s) experience level.
- Each question must test one or more of these skills: {skill_list}
- Make questions progressively harder.

Format exactly as:
{format_lines}"""

    # ============================================================
    # ANSWER EVALUATION
    # ============================================================

    @staticmethod
    def evaluate_answer(question: str, answer: str) -> str:
        """Prompt for scoring one answer on a 1-10 scale."""
        return f"""Evaluate this technical answer:

Q: {question}
A: {answer}

Format:
SCORE: [1-10]

STRENGTHS:
- Point 1
- Point 2

IMPROVEMENTS:
- Point 1
- Point 2

FEEDBACK:
Brief assessment"""

    # ============================================================
    # FINAL SUMMARY
    # ============================================================

    @staticmethod
    def final_summary(role: str, skills: List[str]) -> str:
        """Prompt for the end-of-interview summary, scored 0-100."""
        return f"""Summarize {role} technical interview:
Skills: {", ".join(skills)}

Format:
SCORE: [0-100]

KEY STRENGTHS:
- Point 1
- Point 2

IMPROVEMENTS:
- Point 1
- Point 2

RECOMMENDATION:
Hire/No hire with brief justification"""
