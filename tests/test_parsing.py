import pytest

from conftest import EVALUATION_TEXT, QUESTIONS_TEXT, SUMMARY_TEXT
from interview.errors import InsufficientQuestions
from interview.parsing import FeedbackParser, QuestionListParser


def numbered(count, start=1):
    return "\n".join(f"{n}. [TYPE: Theory] [Medium] Go: item {n}" for n in range(start, start + count))


class TestQuestionListParser:

    def test_parses_ten_items_in_order(self):
        questions = QuestionListParser().parse(QUESTIONS_TEXT)
        assert len(questions) == 10
        assert questions[0] == "[TYPE: Theory] [Easy] Python: Question 1?"
        assert questions[-1] == "[TYPE: Theory] [Hard] Python: Question 10?"

    def test_extra_items_are_discarded(self):
        questions = QuestionListParser().parse(numbered(13))
        assert len(questions) == 10
        assert questions[9].endswith("item 10")
        assert not any("item 11" in q for q in questions)

    @pytest.mark.parametrize("count", [0, 1, 9])
    def test_fewer_than_ten_items_fails(self, count):
        with pytest.raises(InsufficientQuestions) as exc_info:
            QuestionListParser().parse(numbered(count))
        assert exc_info.value.found == count
        assert exc_info.value.retryable

    def test_empty_text_fails(self):
        with pytest.raises(InsufficientQuestions):
            QuestionListParser().parse("")

    def test_items_are_trimmed_and_trailing_blank_lines_removed(self):
        text = "\n\n".join(f"{n}.   What is {n}?   \n\n" for n in range(1, 11))
        questions = QuestionListParser().parse(text)
        assert questions == [f"What is {n}?" for n in range(1, 11)]

    def test_multiline_item_is_kept_whole(self):
        text = numbered(9) + "\n10. Write a function:\n    def add(a, b):\n        ...\n"
        questions = QuestionListParser().parse(text)
        assert questions[9] == "Write a function:\n    def add(a, b):\n        ..."

    def test_preamble_before_first_marker_is_not_a_question(self):
        questions = QuestionListParser().parse("Sure! Here you go.\n" + numbered(10))
        assert all(not q.startswith("Sure") for q in questions)
        assert questions[0].endswith("item 1")

    def test_numbers_inside_a_question_do_not_split_it(self):
        text = numbered(9) + "\n10. Compare Python 3. and Python 2.7 string handling"
        questions = QuestionListParser().parse(text)
        assert questions[9] == "Compare Python 3. and Python 2.7 string handling"

    def test_list_on_a_single_line(self):
        text = "Questions: " + " ".join(f"{n}. Explain topic {n}?" for n in range(1, 12))
        questions = QuestionListParser().parse(text)
        assert questions == [f"Explain topic {n}?" for n in range(1, 11)]

    def test_single_line_list_ignores_numbers_out_of_sequence(self):
        text = " ".join(f"{n}. Topic {n}" for n in range(1, 10)) + " 10. Compare Python 3. and 2.7"
        questions = QuestionListParser().parse(text)
        assert questions[9] == "Compare Python 3. and 2.7"

    def test_short_single_line_list_fails(self):
        text = " ".join(f"{n}. Topic {n}" for n in range(1, 10))
        with pytest.raises(InsufficientQuestions) as exc_info:
            QuestionListParser().parse(text)
        assert exc_info.value.found == 9

    def test_empty_items_are_skipped(self):
        text = "1. \n" + numbered(10, start=2)
        questions = QuestionListParser().parse(text)
        assert questions[0].endswith("item 2")

    def test_required_count_is_configurable(self):
        assert len(QuestionListParser(required=3).parse(numbered(5))) == 3


class TestFeedbackParser:

    def test_well_formed_evaluation(self):
        record = FeedbackParser.parse(EVALUATION_TEXT)
        assert record.score == 7
        assert record.strengths == ["Good naming", "Clear logic"]
        assert record.improvements == ["Add tests"]
        assert record.feedback == "Solid answer overall."

    @pytest.mark.parametrize("text", ["", "   ", "no markers at all", None, "SCORE: none", "- a\n- b"])
    def test_unstructured_text_degrades_to_empty_record(self, text):
        record = FeedbackParser.parse(text)
        assert record.score is None
        assert record.strengths == []
        assert record.improvements == []
        assert record.feedback == ""

    def test_markers_are_case_insensitive(self):
        record = FeedbackParser.parse("score: 4\nstrengths:\n- Fast\nimprovements:\n- Slow\nfeedback:\nOk")
        assert record.score == 4
        assert record.strengths == ["Fast"]
        assert record.improvements == ["Slow"]
        assert record.feedback == "Ok"

    def test_score_is_not_clamped(self):
        assert FeedbackParser.parse("SCORE: 85").score == 85
        assert FeedbackParser.parse("SCORE:0").score == 0

    def test_missing_strengths_does_not_affect_later_sections(self):
        record = FeedbackParser.parse("SCORE: 3\nIMPROVEMENTS:\n- Explain more\nFEEDBACK:\nToo short.")
        assert record.strengths == []
        assert record.improvements == ["Explain more"]
        assert record.feedback == "Too short."

    def test_missing_score_does_not_affect_sections(self):
        record = FeedbackParser.parse(EVALUATION_TEXT.replace("SCORE: 7\n", ""))
        assert record.score is None
        assert record.strengths == ["Good naming", "Clear logic"]

    def test_strengths_without_improvements_runs_to_end(self):
        record = FeedbackParser.parse("STRENGTHS:\n- One\n- Two")
        assert record.strengths == ["One", "Two"]
        assert record.improvements == []
        assert record.feedback == ""

    def test_swallowed_headers_are_suppressed(self):
        text = "STRENGTHS:\n- Good\n- FEEDBACK: stray header\nIMPROVEMENTS:\n- More\n- FEEDBACK lost"
        record = FeedbackParser.parse(text)
        assert record.strengths == ["Good"]
        assert record.improvements == ["More"]

    def test_text_before_first_bullet_is_an_item(self):
        record = FeedbackParser.parse("STRENGTHS: Concise\n- Correct\nIMPROVEMENTS:")
        assert record.strengths == ["Concise", "Correct"]

    def test_hyphen_without_space_does_not_split(self):
        record = FeedbackParser.parse("STRENGTHS:\n- Handles -1 and\n-2 edge cases\nIMPROVEMENTS:\n")
        assert record.strengths == ["Handles -1 and\n-2 edge cases"]

    def test_narrative_runs_to_end_of_text(self):
        record = FeedbackParser.parse("FEEDBACK:\nLine one.\n\nLine two.\n")
        assert record.feedback == "Line one.\n\nLine two."

    def test_summary_layout_uses_same_parser(self):
        record = FeedbackParser.parse(SUMMARY_TEXT)
        assert record.score == 82
        assert record.strengths == ["Strong fundamentals"]
        # No FEEDBACK marker: improvements run to the end and swallow the recommendation
        assert record.improvements[0] == "Practice system design\n\nRECOMMENDATION:\nHire, solid mid-level candidate."
        assert record.feedback == ""
