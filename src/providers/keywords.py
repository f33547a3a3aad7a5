"""Short documentation for reserved words and two-word phrases."""

from __future__ import annotations

from utils import normalize_name

KEYWORD_DOCS: dict[str, tuple[str, str]] = {
    "if": ("If condition Then", "Runs the following block when the condition is true."),
    "then": ("If condition Then", "Separates an If condition from its statements."),
    "else": ("Else", "Starts the block run when no If or ElseIf condition held."),
    "else if": ("Else If condition", "Tests another condition when the previous ones failed."),
    "elseif": ("ElseIf condition", "Tests another condition when the previous ones failed."),
    "end if": ("End If", "Closes an If block."),
    "endif": ("EndIf", "Closes an If block."),
    "select": ("Select expression", "Compares an expression against a list of Case values."),
    "case": ("Case value[, value...]", "Starts the block run when the Select expression matches."),
    "default": ("Default", "Starts the block run when no Case matched."),
    "end select": ("End Select", "Closes a Select block."),
    "for": ("For variable = start To end [Step step]", "Repeats a block for a range of values."),
    "each": ("For variable.Type = Each Type", "Iterates over every object of a type."),
    "to": ("For variable = start To end", "Separates the start and end values of a For loop."),
    "step": ("Step increment", "Sets the increment of a For loop."),
    "next": ("Next", "Closes a For loop."),
    "while": ("While condition", "Repeats a block while the condition is true."),
    "wend": ("Wend", "Closes a While loop."),
    "repeat": ("Repeat", "Starts a loop closed by Until or Forever."),
    "until": ("Until condition", "Closes a Repeat loop once the condition is true."),
    "forever": ("Forever", "Closes a Repeat loop that never ends on its own."),
    "exit": ("Exit", "Leaves the innermost loop."),
    "function": ("Function name[suffix]([parameters])", "Declares a function."),
    "end function": ("End Function", "Closes a function declaration."),
    "return": ("Return [value]", "Leaves a function, optionally returning a value."),
    "type": ("Type name", "Declares a custom type."),
    "field": ("Field name[suffix][, ...]", "Declares fields of a custom type."),
    "end type": ("End Type", "Closes a type declaration."),
    "new": ("New Type", "Creates an object of a custom type."),
    "delete": ("Delete object", "Deletes an object, or every object with Delete Each."),
    "first": ("First Type", "Returns the first object of a type."),
    "last": ("Last Type", "Returns the last object of a type."),
    "before": ("Before object", "Returns the object before another in its type list."),
    "after": ("After object", "Returns the object after another in its type list."),
    "insert": ("Insert object Before|After other", "Moves an object within its type list."),
    "null": ("Null", "The empty object reference."),
    "global": ("Global name[suffix][ = value]", "Declares a variable visible everywhere."),
    "local": ("Local name[suffix][ = value]", "Declares a variable local to its function."),
    "const": ("Const name[suffix] = value", "Declares a constant."),
    "dim": ("Dim name[suffix](size[, ...])", "Declares a global array."),
    "goto": ("Goto label", "Jumps to a label."),
    "gosub": ("Gosub label", "Jumps to a label and returns on Return."),
    "include": ('Include "file"', "Includes another source file."),
    "and": ("a And b", "Logical and bitwise and."),
    "or": ("a Or b", "Logical and bitwise or."),
    "xor": ("a Xor b", "Bitwise exclusive or."),
    "not": ("Not a", "Logical negation."),
    "mod": ("a Mod b", "Remainder of a division."),
    "shl": ("a Shl b", "Shifts bits left."),
    "shr": ("a Shr b", "Shifts bits right."),
    "sar": ("a Sar b", "Shifts bits right, keeping the sign."),
    "true": ("True", "The value 1."),
    "false": ("False", "The value 0."),
    "pi": ("Pi", "The constant 3.14159..."),
    "end": ("End", "Ends the program."),
}

PHRASE_FIRST_WORDS = frozenset({"end", "else"})
PHRASE_SECOND_WORDS: dict[str, frozenset[str]] = {
    "end": frozenset({"if", "function", "type", "select"}),
    "else": frozenset({"if"}),
}


def keyword_doc(word: str) -> tuple[str, str] | None:
    """Return ``(syntax, description)`` for a reserved word or phrase."""
    return KEYWORD_DOCS.get(normalize_name(" ".join(word.split())))


def phrase(first: str, second: str | None) -> str | None:
    """Join two words into a known phrase such as ``end if``."""
    if second is None:
        return None
    first_key = normalize_name(first)
    if normalize_name(second) in PHRASE_SECOND_WORDS.get(first_key, frozenset()):
        return f"{first_key} {normalize_name(second)}"
    return None


__all__ = ["KEYWORD_DOCS", "PHRASE_FIRST_WORDS", "keyword_doc", "phrase"]
