import random

import pytest

import text_source
from text_source import TextLoadError, generate_passage, load_target_text, load_words


class TestLoadTargetText:
    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "typing.txt"
        path.write_text("naïve café\n", encoding = "utf-8")
        assert load_target_text(path) == "naïve café"

    def test_keeps_inner_newlines(self, tmp_path):
        path = tmp_path / "typing.txt"
        path.write_text("one\ntwo\r\n", encoding = "utf-8")
        assert load_target_text(str(path)) == "one\ntwo"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("", encoding = "utf-8")
        assert load_target_text(path) == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(TextLoadError) as e:
            load_target_text(tmp_path / "nope.txt")
        assert "not found" in str(e.value)

    def test_directory_is_unreadable(self, tmp_path):
        with pytest.raises(TextLoadError):
            load_target_text(tmp_path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.txt"
        path.write_bytes(b"caf\xe9")
        with pytest.raises(TextLoadError) as e:
            load_target_text(path)
        assert "UTF-8" in str(e.value)


class TestPassages:
    def test_load_words_filters(self, monkeypatch):
        monkeypatch.setattr(text_source, "top_n_list", lambda lang, n: ["the", "a", "it's", "42", "house", "of"])
        assert load_words(10) == ["the", "house"]

    def test_generate_passage(self):
        words = ["alpha", "bravo", "charlie", "delta"]
        passage = generate_passage(3, words = words, rng = random.Random(1))
        picked = passage.split(" ")
        assert len(picked) == 3
        assert len(set(picked)) == 3
        assert set(picked) <= set(words)

    def test_generate_passage_short_word_list(self):
        passage = generate_passage(10, words = ["one", "two"], rng = random.Random(0))
        assert sorted(passage.split()) == ["one", "two"]

    def test_generate_passage_uses_wordfreq(self, monkeypatch):
        monkeypatch.setattr(text_source, "top_n_list", lambda lang, n: ["zebra", "yak"])
        assert sorted(generate_passage(2).split()) == ["yak", "zebra"]

    def test_generate_passage_without_words(self):
        with pytest.raises(TextLoadError):
            generate_passage(3, words = [])
