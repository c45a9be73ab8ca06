"""Unit tests for the dialect recognizers and the added-line symbol extractor."""

import pytest

from crossfile_review.core.domain.review import FileChange
from crossfile_review.core.domain.symbols import (
    JavaRecognizer,
    KotlinRecognizer,
    Symbol,
    SymbolKind,
    UsageKind,
    extract_symbols,
    extract_used_symbols,
    recognizer_for,
)


def _added(path: str, *lines: str, **flags: bool) -> FileChange:
    body = "\n".join(f"+{line}" for line in lines)
    return FileChange(file_path=path, diff=f"@@ -0,0 +1,{len(lines)} @@\n{body}", **flags)


# ── Recognizer selection ──────────────────────────────────────────


class TestRecognizerFor:
    def test_selects_by_extension(self) -> None:
        assert isinstance(recognizer_for("kt"), KotlinRecognizer)
        assert isinstance(recognizer_for("java"), JavaRecognizer)

    def test_unknown_extension(self) -> None:
        assert recognizer_for("py") is None


# ── Kotlin definitions ────────────────────────────────────────────


class TestKotlinDefinitions:
    @pytest.mark.parametrize(
        ("line", "name", "kind"),
        [
            ("fun getUser(id: Long): User {", "getUser", SymbolKind.FUNCTION),
            ("suspend fun <T> load(key: String): T", "load", SymbolKind.FUNCTION),
            ("data class UserDto(val id: Long)", "UserDto", SymbolKind.DATA_CLASS),
            ("sealed class Result", "Result", SymbolKind.CLASS),
            ("interface UserRepository {", "UserRepository", SymbolKind.INTERFACE),
            ("object Defaults {", "Defaults", SymbolKind.OBJECT),
            ("val timeout: Int = 30", "timeout", SymbolKind.PROPERTY),
            ("const val MAX_RETRIES = 3", "MAX_RETRIES", SymbolKind.CONSTANT),
        ],
    )
    def test_recognizes_definition(self, line: str, name: str, kind: SymbolKind) -> None:
        symbols = extract_symbols(_added("src/User.kt", line))

        assert symbols[0] == Symbol(name, kind, "src/User.kt", is_public=True)

    def test_private_modifier_marks_symbol_non_public(self) -> None:
        symbols = extract_symbols(_added("src/User.kt", "private fun helper() = 1"))

        assert symbols == [Symbol("helper", SymbolKind.FUNCTION, "src/User.kt", is_public=False)]

    def test_duplicate_names_keep_first_match(self) -> None:
        symbols = extract_symbols(_added("src/User.kt", "data class User(val id: Long)"))

        assert [(s.name, s.kind) for s in symbols] == [
            ("User", SymbolKind.DATA_CLASS),
            ("id", SymbolKind.PROPERTY),
        ]


# ── Java definitions ──────────────────────────────────────────────


class TestJavaDefinitions:
    def test_class_and_method(self) -> None:
        file = _added(
            "src/UserService.java",
            "public class UserService {",
            "public User findUser(long id) {",
        )

        symbols = extract_symbols(file)

        assert [(s.name, s.kind) for s in symbols] == [
            ("UserService", SymbolKind.CLASS),
            ("findUser", SymbolKind.FUNCTION),
        ]

    def test_enum_is_reported_as_class(self) -> None:
        symbols = extract_symbols(_added("src/Role.java", "public enum Role {"))

        assert symbols[0].kind is SymbolKind.CLASS

    def test_static_final_field_is_constant(self) -> None:
        symbols = extract_symbols(
            _added("src/Limits.java", "public static final int MAX_SIZE = 10;")
        )

        assert symbols == [Symbol("MAX_SIZE", SymbolKind.CONSTANT, "src/Limits.java")]

    def test_protected_field_is_not_public(self) -> None:
        symbols = extract_symbols(_added("src/Base.java", "protected String name;"))

        assert symbols[0].is_public is False


# ── Extraction rules ──────────────────────────────────────────────


class TestExtractionRules:
    def test_only_added_lines_count(self) -> None:
        file = FileChange(
            file_path="src/A.kt",
            diff="@@ -1,2 +1,2 @@\n fun kept() = 1\n-fun removed() = 2\n+fun added() = 3",
        )

        assert [s.name for s in extract_symbols(file)] == ["added"]

    def test_comments_and_blank_lines_are_skipped(self) -> None:
        file = _added("src/A.kt", "// fun notReal() = 1", "/* class Nope */", "   ")

        assert extract_symbols(file) == []

    def test_deleted_and_unsupported_files_yield_nothing(self) -> None:
        assert extract_symbols(_added("src/A.kt", "fun a() = 1", deleted_file=True)) == []
        assert extract_symbols(_added("src/a.py", "def a(): pass")) == []
        assert extract_used_symbols(_added("README.md", "call(x)")) == []


# ── Used symbols ──────────────────────────────────────────────────


class TestUsedSymbols:
    def test_import_call_and_member_access(self) -> None:
        file = _added(
            "src/Api.kt",
            "import com.acme.repo.UserRepository",
            "val user = repository.findById(id)",
        )

        used = {u.name: (u.kind, u.line_number) for u in extract_used_symbols(file)}

        assert used["UserRepository"] == (UsageKind.IMPORT, 1)
        assert used["findById"] == (UsageKind.FUNCTION_CALL, 2)

    def test_kotlin_constructor_call_is_class_usage(self) -> None:
        used = extract_used_symbols(_added("src/Api.kt", "val dto = UserDto(1)"))

        assert used[0].name == "UserDto"
        assert used[0].kind is UsageKind.CLASS_USAGE

    def test_java_constructor_needs_new(self) -> None:
        used = extract_used_symbols(_added("src/Api.java", "Order order = new Order(id);"))

        assert ("Order", UsageKind.CLASS_USAGE) in [(u.name, u.kind) for u in used]

    def test_reserved_words_are_filtered(self) -> None:
        used = extract_used_symbols(_added("src/Api.kt", "if (ready) return"))

        assert used == []

    def test_line_offset_counts_skipped_added_lines(self) -> None:
        file = _added("src/Api.kt", "", "// note", "process(data)")

        used = extract_used_symbols(file)

        assert used[0].name == "process"
        assert used[0].line_number == 3

    def test_used_symbols_start_unresolved(self) -> None:
        used = extract_used_symbols(_added("src/Api.kt", "save(user)"))

        assert used[0].definition_file is None
        assert used[0].resolved_to("src/Repo.kt").definition_file == "src/Repo.kt"
