"""
Testing the RhymeAGrams and TumblePuns rules.
"""
from engines import RhymeAGramsEngine, TumblePunsEngine
from models import Completion, RhymeAGramsState, TumblePunsState
from services.content_store import FALLBACK_RHYMEAGRAMS, FALLBACK_TUMBLEPUNS


def type_word(engine, word):
    for ch in word:
        engine.append_letter(ch)


# --- RhymeAGrams ---

def test_rhymeagrams_answers_in_any_order():
    engine = RhymeAGramsEngine(FALLBACK_RHYMEAGRAMS)
    for word in ["PIKE", "bike", "LIKE", "HIKE"]:
        type_word(engine, word)
    assert engine.answers == ["PIKE", "BIKE", "LIKE", "HIKE"]
    assert engine.correct_indices == {0, 1, 2, 3}
    assert engine.is_solved
    assert engine.completion is Completion.SOLVED


def test_rhymeagrams_duplicate_answer_counts_once():
    engine = RhymeAGramsEngine(FALLBACK_RHYMEAGRAMS)
    for word in ["BIKE", "BIKE", "LIKE", "HIKE"]:
        type_word(engine, word)
    assert engine.correct_indices == {0, 2, 3}
    assert not engine.is_solved
    assert engine.completion is Completion.INCORRECT


def test_rhymeagrams_auto_advance_and_max_length():
    engine = RhymeAGramsEngine(FALLBACK_RHYMEAGRAMS)
    assert engine.selected_slot == 0
    type_word(engine, "BIKE")
    assert engine.selected_slot == 1

    engine.select_slot(0)
    assert engine.append_letter("S") is False
    assert engine.answers[0] == "BIKE"


def test_rhymeagrams_delete_steps_back_from_empty_slot():
    engine = RhymeAGramsEngine(FALLBACK_RHYMEAGRAMS)
    type_word(engine, "BIKE")
    assert engine.selected_slot == 1
    assert engine.delete_letter()
    assert engine.selected_slot == 0
    assert engine.answers[0] == "BIK"


def test_rhymeagrams_noops_without_selection():
    engine = RhymeAGramsEngine(FALLBACK_RHYMEAGRAMS)
    assert engine.delete_letter() is False
    engine.select_slot(None)
    assert engine.append_letter("B") is False
    assert engine.select_slot(7) is False
    assert engine.append_letter("-") is False
    assert engine.answers == ["", "", "", ""]


def test_rhymeagrams_used_pyramid_positions():
    engine = RhymeAGramsEngine(FALLBACK_RHYMEAGRAMS)
    type_word(engine, "BI")
    assert engine.used_pyramid_positions == {(0, 0), (2, 2)}


def test_rhymeagrams_restore_rejects_wrong_shape():
    engine = RhymeAGramsEngine(FALLBACK_RHYMEAGRAMS, RhymeAGramsState(answers=["BIKE"], selected_slot=0))
    assert engine.answers == ["", "", "", ""]
    engine = RhymeAGramsEngine.from_json(FALLBACK_RHYMEAGRAMS, RhymeAGramsState(answers=["BI", "", "", ""], selected_slot=2).to_json())
    assert engine.answers[0] == "BI"
    assert engine.selected_slot == 2


# --- TumblePuns ---

def solve_words(engine):
    for i, word in enumerate(FALLBACK_TUMBLEPUNS.words):
        engine.select_word(i)
        type_word(engine, word.solution)


def test_tumblepuns_solves_with_final_answer():
    engine = TumblePunsEngine(FALLBACK_TUMBLEPUNS)
    solve_words(engine)
    assert engine.words_solved
    assert engine.shaded_letters == "IDOELMRT"
    engine.select_final_answer()
    type_word(engine, "OLDTIMER")
    assert engine.final_answer == "OLDTIMER"
    assert engine.is_solved
    assert engine.completion is Completion.SOLVED


def test_tumblepuns_selection_is_exclusive():
    engine = TumblePunsEngine(FALLBACK_TUMBLEPUNS)
    assert engine.select_word(2)
    engine.select_final_answer()
    assert engine.selected_word_index is None
    assert engine.is_final_answer_selected
    engine.select_word(1)
    assert engine.selected_word_index == 1
    assert not engine.is_final_answer_selected


def test_tumblepuns_length_limits():
    engine = TumblePunsEngine(FALLBACK_TUMBLEPUNS)
    type_word(engine, "DITZYX")
    assert engine.word_answers[0] == "DITZY"
    engine.select_final_answer()
    type_word(engine, "OLDTIMERS")
    assert engine.final_answer == "OLDTIMER"
    assert engine.delete_letter()
    assert engine.final_answer == "OLDTIME"


def test_tumblepuns_wrong_final_answer_is_incorrect():
    engine = TumblePunsEngine(FALLBACK_TUMBLEPUNS)
    solve_words(engine)
    engine.select_final_answer()
    type_word(engine, "OLDMITER")
    assert engine.completion is Completion.INCORRECT
    engine.clear_final_answer()
    assert engine.final_answer == ""
    assert engine.completion is Completion.FILLING


def test_tumblepuns_shaded_letters_only_from_correct_words():
    engine = TumblePunsEngine(FALLBACK_TUMBLEPUNS)
    engine.select_word(1)
    type_word(engine, "WINDOW")
    engine.select_word(0)
    type_word(engine, "DITZA")
    assert engine.correct_indices == {1}
    assert engine.shaded_letters == "DO"


def test_tumblepuns_state_roundtrip_keeps_selection():
    engine = TumblePunsEngine(FALLBACK_TUMBLEPUNS)
    engine.select_word(3)
    type_word(engine, "MAJ")
    restored = TumblePunsEngine.from_json(FALLBACK_TUMBLEPUNS, engine.to_json())
    assert restored.word_answers == ["", "", "", "MAJ"]
    assert restored.selected_word_index == 3
    bad = TumblePunsEngine(FALLBACK_TUMBLEPUNS, TumblePunsState(word_answers=["TOOLONGWORD", "", "", ""]))
    assert bad.word_answers == ["", "", "", ""]


def test_tumblepuns_always_has_exactly_one_selection():
    engine = TumblePunsEngine(FALLBACK_TUMBLEPUNS)
    assert engine.selected_word_index == 0
    assert not engine.is_final_answer_selected
    assert engine.append_letter("D")
    assert engine.word_answers[0] == "D"

    assert engine.select_word(None) is False
    assert engine.select_word(4) is False
    assert engine.selected_word_index == 0

    engine.select_final_answer()
    engine.reset()
    assert engine.selected_word_index == 0
    assert not engine.is_final_answer_selected


def test_tumblepuns_restore_without_selection_selects_first_word():
    saved = TumblePunsState(word_answers=["DIT", "", "", ""], selected_word_index=None)
    engine = TumblePunsEngine(FALLBACK_TUMBLEPUNS, saved)
    assert engine.word_answers[0] == "DIT"
    assert engine.selected_word_index == 0
