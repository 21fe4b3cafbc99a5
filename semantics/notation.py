"""
semantics/notation.py
=====================

Compact textual notation for sentence ASTs, in both directions.

    to_notation(sentence)  -> str
    parse_notation(text)   -> SentenceNode

The notation is a tree of wrappers:

    sentence(past+simple(eat(agent:'he, patient:noun(head:'apple))))
    question(sentence(present+perfect(not(see(experiencer:'you, stimulus:?who)))))
    modal(ability:can, sentence(present+simple(swim(agent:'I))))
    not(modal(obligation:must, sentence(...)))
    imperative(sentence(present+simple(frequency('always, read(...)))))
    fact(IF(present+simple(...), then:present+simple(...)))
    at('last week, sentence(...))

Conventions:

- `wrapper(arg, ...)` nests; `key:value` names an argument
- `tense+aspect(...)` carries the clause's tense and aspect
- `'word` is a quoted literal (pronouns, heads, determiners, adverbs);
  a literal runs to the next `,` `(` `)` `[` or `]`
- `?who`, `?what`, `?where` ... are interrogatives, written unquoted
- `___` is a slot left empty
- lower-case `and` / `or` coordinate noun or verb phrases, `?which`
  marks the alternatives of a choice question; upper-case
  `AND` / `OR` / `NOT` / `IF` / `BECAUSE` are logical operators

Parsing normalises the sentence type: every question is written
`question(...)` and the parser recovers yes/no, wh- or choice from the
clause content; a declarative sentence with a modal comes back as a
modal sentence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from arpeggio import EOF, NoMatch, ParserPython, PTNodeVisitor, ZeroOrMore, visit_parse_tree
from arpeggio import Optional as Maybe
from arpeggio import RegExMatch as _
from pydantic import ValidationError

from app.core.domain.determiners import PLURAL, UNCOUNTABLE
from app.core.domain.exceptions import NotationError
from app.core.domain.models import (
    AdjectivePhraseNode,
    AdverbNode,
    AdverbType,
    Aspect,
    ClauseNode,
    Conjunction,
    CoordinatedNounPhraseNode,
    DeterminerConfig,
    FilledArgument,
    LogicOperator,
    ModalKind,
    NounHead,
    NounPhraseNode,
    Polarity,
    PrepositionalPhraseNode,
    PronounHead,
    PropositionNode,
    SemanticRole,
    SentenceNode,
    SentenceType,
    Tense,
    VerbCoordination,
    VerbPhraseNode,
    VerbRef,
)
from morphology.conjugation import modal_form

EMPTY = "___"

_QUESTIONS = (SentenceType.YES_NO_QUESTION, SentenceType.WH_QUESTION, SentenceType.CHOICE_QUESTION)

# Adverb type -> wrapper name
_ADVERB_WRAPPERS = {
    AdverbType.FREQUENCY: "frequency",
    AdverbType.MANNER: "manner",
    AdverbType.PLACE: "locative",
    AdverbType.TIME: "time",
    AdverbType.DEGREE: "degree",
    None: "adverb",
}
_ADVERB_NAMES = {name: kind for kind, name in _ADVERB_WRAPPERS.items()}

_LOGIC_NAMES = {op.value for op in LogicOperator}


# ---------------------------------------------------------------------------
# 1. AST -> notation
# ---------------------------------------------------------------------------


def _lit(text: str) -> str:
    return f"'{text}"


def to_notation(sentence: SentenceNode) -> str:
    """Serialise a sentence AST to compact notation."""
    stype = SentenceType(sentence.sentence_type)

    if stype is SentenceType.FACT and sentence.proposition is not None:
        text = f"fact({_proposition(sentence.proposition)})"
    else:
        clause = sentence.clause
        text = f"sentence({_clause(clause)})"
        if clause.modal is not None:
            kind = ModalKind(clause.modal)
            text = f"modal({kind.value}:{modal_form(kind, Tense.PRESENT).text}, {text})"
            if clause.modal_polarity is Polarity.NEGATIVE or stype is SentenceType.NEGATED_MODAL:
                text = f"not({text})"

        if stype is SentenceType.FACT:
            text = f"fact({text})"
        elif stype is SentenceType.IMPERATIVE:
            text = f"imperative({text})"
        elif stype in _QUESTIONS:
            text = f"question({text})"

    if sentence.time_adverbial:
        text = f"at({_lit(sentence.time_adverbial)}, {text})"
    return text


def _clause(clause: ClauseNode) -> str:
    inner = _verb_phrase(clause.verb_phrase)
    if clause.polarity is Polarity.NEGATIVE:
        inner = f"not({inner})"
    return f"{Tense(clause.tense).value}+{Aspect(clause.aspect).value}({inner})"


def _verb_phrase(vp: VerbPhraseNode) -> str:
    args = ", ".join(f"{a.role.value}:{_filler(a.filler)}" for a in vp.arguments)
    text = f"{vp.verb.lemma}({args})"

    for adverb in reversed(vp.adverbs):
        kind = AdverbType(adverb.type) if adverb.type is not None else None
        value = adverb.lemma if adverb.is_interrogative else _lit(adverb.lemma)
        text = f"{_ADVERB_WRAPPERS[kind]}({value}, {text})"

    for pp in reversed(vp.prepositional_phrases):
        text = f"pp({_lit(pp.preposition)}, {_filler(pp.object)}, {text})"

    if vp.coordinated_with is not None:
        conj = vp.coordinated_with.conjunction.value
        text = f"{conj}({text}, {_verb_phrase(vp.coordinated_with.verb_phrase)})"
    return text


def _adjectives(adjectives: Tuple[str, ...]) -> str:
    if len(adjectives) == 1:
        return f"adj:{_lit(adjectives[0])}"
    return "adj:[" + ", ".join(_lit(a) for a in adjectives) + "]"


def _filler(filler) -> str:
    if filler is None:
        return EMPTY

    if isinstance(filler, AdjectivePhraseNode):
        if filler.degree:
            return f"degree({_lit(filler.degree)}, {_lit(filler.lemma)})"
        return f"adj({_lit(filler.lemma)})"

    if isinstance(filler, CoordinatedNounPhraseNode):
        name = "?which" if filler.choice else filler.conjunction.value
        return f"{name}(" + ", ".join(_filler(c) for c in filler.conjuncts) + ")"

    modifier = None
    if filler.prep_modifier is not None:
        pp = filler.prep_modifier
        modifier = f"post:pp({_lit(pp.preposition)}, {_filler(pp.object)})"

    if isinstance(filler.head, PronounHead):
        head = filler.head.lemma if filler.head.is_interrogative else _lit(filler.head.lemma)
        parts = [head]
        if filler.adjectives:
            parts.append(_adjectives(filler.adjectives))
        if modifier:
            parts.append(modifier)
        return head if len(parts) == 1 else f"pronoun({', '.join(parts)})"

    det = filler.determiners
    parts: List[str] = []
    if det.pre:
        parts.append(f"pre:{_lit(det.pre)}")
    if det.central:
        parts.append(f"det:{_lit(det.central)}")
    if det.post:
        parts.append(f"post:{det.post}" if det.post in (PLURAL, UNCOUNTABLE) else f"post:{_lit(det.post)}")
    if filler.adjectives:
        parts.append(_adjectives(filler.adjectives))
    parts.append(f"head:{_lit(filler.head.lemma)}")
    if modifier:
        parts.append(modifier)
    return f"noun({', '.join(parts)})"


def _proposition(prop: PropositionNode) -> str:
    operands = [_operand(o) for o in prop.operands]
    op = prop.operator
    if op is LogicOperator.IF:
        return f"IF({operands[0]}, then:{operands[1]})"
    if op is LogicOperator.BECAUSE:
        return f"BECAUSE({operands[0]}, effect:{operands[1]})"
    return f"{op.value}({', '.join(operands)})"


def _operand(operand) -> str:
    if operand is None:
        return EMPTY
    if isinstance(operand, PropositionNode):
        return _proposition(operand)
    return _clause(operand)


# ---------------------------------------------------------------------------
# 2. Grammar & generic tree
# ---------------------------------------------------------------------------
#
#   notation      := term EOF
#   term          := quoted | wrapper | bracketed | ident
#   wrapper       := ident "(" argument_list ")"
#   argument_list := [argument ("," argument)*]
#   argument      := [ident ":"] term
#   bracketed     := "[" [term ("," term)*] "]"
#
# Whitespace between tokens is skipped by the parser; literals keep their
# inner spaces ('last week) and lose the trailing ones.


@dataclass(frozen=True)
class Literal:
    text: str
    offset: int = 0


@dataclass(frozen=True)
class Symbol:
    name: str
    offset: int = 0


@dataclass(frozen=True)
class ListValue:
    items: Tuple["Value", ...]
    offset: int = 0


@dataclass(frozen=True)
class Arg:
    key: Optional[str]
    value: "Value"


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple[Arg, ...]
    offset: int = 0


Value = Union[Literal, Symbol, ListValue, Call]


def quoted():
    return _(r"'[^,()\[\]]*")


def ident():
    return _(r"[A-Za-z_?][A-Za-z0-9_?+]*")


def arg_key():
    return ident, ":"


def argument():
    return Maybe(arg_key), term


def argument_list():
    return Maybe(argument, ZeroOrMore(",", argument))


def wrapper():
    return ident, "(", argument_list, ")"


def element_list():
    return Maybe(term, ZeroOrMore(",", term))


def bracketed():
    return "[", element_list, "]"


def term():
    return [quoted, wrapper, bracketed, ident]


def notation():
    return term, EOF


@dataclass(frozen=True)
class _Key:
    name: str


class _TreeBuilder(PTNodeVisitor):
    """Turns the arpeggio parse tree into Call/Arg/Literal/Symbol values."""

    def visit_quoted(self, node, children):
        text = node.value[1:].strip()
        if not text:
            raise NotationError("Empty literal", node.position)
        return Literal(text, node.position)

    def visit_ident(self, node, children):
        return Symbol(node.value, node.position)

    def visit_arg_key(self, node, children):
        return _Key(children[0].name)

    def visit_argument(self, node, children):
        if isinstance(children[0], _Key):
            return Arg(children[0].name, children[1])
        return Arg(None, children[0])

    def visit_argument_list(self, node, children):
        return tuple(c for c in children if isinstance(c, Arg))

    def visit_wrapper(self, node, children):
        name = children[0].name
        arguments = next((c for c in children[1:] if isinstance(c, tuple)), ())
        return Call(name, arguments, node.position)

    def visit_element_list(self, node, children):
        return tuple(c for c in children if not isinstance(c, str))

    def visit_bracketed(self, node, children):
        found = next((c for c in children if isinstance(c, tuple)), ())
        return ListValue(found, node.position)

    def visit_term(self, node, children):
        return children[0]

    def visit_notation(self, node, children):
        return next(c for c in children if not isinstance(c, str))


_PARSER: Optional[ParserPython] = None


def _get_parser() -> ParserPython:
    global _PARSER
    if _PARSER is None:
        _PARSER = ParserPython(notation, skipws=True)
    return _PARSER


def parse_tree(text: str) -> Value:
    """Parse notation into the generic tree without interpreting it."""
    if not text.strip():
        raise NotationError("Empty notation", 0)
    try:
        tree = _get_parser().parse(text)
    except NoMatch as exc:
        raise NotationError(f"Malformed notation: {exc}", exc.position) from exc
    return visit_parse_tree(tree, _TreeBuilder())


# ---------------------------------------------------------------------------
# 3. Tree -> AST
# ---------------------------------------------------------------------------


def parse_notation(text: str) -> SentenceNode:
    """
    Parse compact notation into a `SentenceNode`.

    Raises:
        NotationError: on syntax errors, unknown wrappers or roles, and
        structures the AST rejects (e.g. forbidden determiner combinations).
    """
    tree = parse_tree(text)
    try:
        return _build_sentence(tree)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise NotationError(f"Invalid structure: {first.get('msg', exc)}") from exc


def _offset(value: Value) -> int:
    return getattr(value, "offset", 0)


def _call(value: Value, what: str = "a wrapper") -> Call:
    if not isinstance(value, Call):
        raise NotationError(f"Expected {what}", _offset(value))
    return value


def _positional(call: Call, count: int) -> List[Value]:
    values = [a.value for a in call.args if a.key is None]
    if len(values) != count or len(values) != len(call.args):
        raise NotationError(f"{call.name}() takes {count} positional argument(s)", call.offset)
    return values


def _literal(value: Value) -> str:
    if not isinstance(value, Literal):
        raise NotationError("Expected a quoted literal", _offset(value))
    return value.text


def _enum(enum_cls, raw: str, offset: int):
    try:
        return enum_cls(raw)
    except ValueError:
        raise NotationError(f"Unknown {enum_cls.__name__} {raw!r}", offset) from None


def _build_sentence(node: Value) -> SentenceNode:
    call = _call(node, "a sentence wrapper")
    time_adverbial = None
    if call.name == "at":
        lit, inner = _positional(call, 2)
        time_adverbial = _literal(lit)
        call = _call(inner, "a sentence wrapper")

    if call.name == "fact":
        (body,) = _positional(call, 1)
        body = _call(body)
        if body.name in _LOGIC_NAMES:
            return SentenceNode(
                sentence_type=SentenceType.FACT,
                proposition=_build_proposition(body),
                time_adverbial=time_adverbial,
            )
        clause, _ = _build_body(body)
        return SentenceNode(sentence_type=SentenceType.FACT, clause=clause, time_adverbial=time_adverbial)

    if call.name in ("question", "imperative"):
        (body,) = _positional(call, 1)
        clause, _ = _build_body(_call(body))
        stype = SentenceType.IMPERATIVE if call.name == "imperative" else _question_type(clause)
        return SentenceNode(sentence_type=stype, clause=clause, time_adverbial=time_adverbial)

    clause, has_modal = _build_body(call)
    if not has_modal:
        stype = SentenceType.DECLARATIVE
    elif clause.modal_polarity is Polarity.NEGATIVE:
        stype = SentenceType.NEGATED_MODAL
    else:
        stype = SentenceType.MODAL
    return SentenceNode(sentence_type=stype, clause=clause, time_adverbial=time_adverbial)


def _build_body(call: Call) -> Tuple[ClauseNode, bool]:
    """sentence(...), modal(...), not(modal(...)) or a bare clause -> (clause, has_modal)."""
    if call.name == "not":
        (inner,) = _positional(call, 1)
        clause, has_modal = _build_body(_call(inner))
        if not has_modal:
            raise NotationError("not() around a sentence must wrap a modal", call.offset)
        return clause.model_copy(update={"modal_polarity": Polarity.NEGATIVE}), True

    if call.name == "modal":
        if len(call.args) != 2 or call.args[0].key is None or call.args[1].key is not None:
            raise NotationError("modal() takes kind:form and a sentence", call.offset)
        kind = _enum(ModalKind, call.args[0].key, call.offset)
        clause, _ = _build_body(_call(call.args[1].value))
        return clause.model_copy(update={"modal": kind}), True

    if call.name == "sentence":
        (inner,) = _positional(call, 1)
        return _build_clause(_call(inner, "a tense+aspect clause")), False

    return _build_clause(call), False


def _build_clause(call: Call) -> ClauseNode:
    tense_name, sep, aspect_name = call.name.partition("+")
    if not sep:
        raise NotationError(f"Expected tense+aspect, found {call.name!r}", call.offset)
    tense = _enum(Tense, tense_name, call.offset)
    aspect = _enum(Aspect, aspect_name, call.offset)

    (inner,) = _positional(call, 1)
    inner = _call(inner, "a verb phrase")
    polarity = Polarity.AFFIRMATIVE
    if inner.name == "not":
        polarity = Polarity.NEGATIVE
        (inner,) = _positional(inner, 1)
        inner = _call(inner, "a verb phrase")

    return ClauseNode(verb_phrase=_build_verb_phrase(inner), tense=tense, aspect=aspect, polarity=polarity)


def _append_coordination(left: VerbPhraseNode, conjunction: Conjunction, right: VerbPhraseNode) -> VerbPhraseNode:
    link = left.coordinated_with
    if link is None:
        return left.model_copy(
            update={"coordinated_with": VerbCoordination(conjunction=conjunction, verb_phrase=right)}
        )
    tail = _append_coordination(link.verb_phrase, conjunction, right)
    return left.model_copy(
        update={"coordinated_with": VerbCoordination(conjunction=link.conjunction, verb_phrase=tail)}
    )


def _build_verb_phrase(call: Call) -> VerbPhraseNode:
    if call.name in ("and", "or"):
        first, second = _positional(call, 2)
        left = _build_verb_phrase(_call(first, "a verb phrase"))
        right = _build_verb_phrase(_call(second, "a verb phrase"))
        return _append_coordination(left, Conjunction(call.name), right)

    if call.name == "pp":
        prep, obj, inner = _positional(call, 3)
        vp = _build_verb_phrase(_call(inner, "a verb phrase"))
        pp = PrepositionalPhraseNode(preposition=_literal(prep), object=_build_nominal(obj))
        return vp.model_copy(update={"prepositional_phrases": (pp, *vp.prepositional_phrases)})

    if call.name in _ADVERB_NAMES:
        value, inner = _positional(call, 2)
        vp = _build_verb_phrase(_call(inner, "a verb phrase"))
        adverb = AdverbNode(lemma=_adverb_lemma(value), type=_ADVERB_NAMES[call.name])
        return vp.model_copy(update={"adverbs": (adverb, *vp.adverbs)})

    arguments = []
    for arg in call.args:
        if arg.key is None:
            raise NotationError(f"Arguments of '{call.name}' are written role:value", _offset(arg.value))
        role = _enum(SemanticRole, arg.key, _offset(arg.value))
        arguments.append(FilledArgument(role=role, filler=_build_filler(arg.value)))
    return VerbPhraseNode(verb=VerbRef(lemma=call.name), arguments=tuple(arguments))


def _adverb_lemma(value: Value) -> str:
    if isinstance(value, Symbol) and value.name.startswith("?"):
        return value.name
    return _literal(value)


def _build_filler(value: Value):
    if isinstance(value, Call) and value.name == "adj":
        (lemma,) = _positional(value, 1)
        return AdjectivePhraseNode(lemma=_literal(lemma))
    if isinstance(value, Call) and value.name == "degree":
        degree, lemma = _positional(value, 2)
        return AdjectivePhraseNode(lemma=_literal(lemma), degree=_literal(degree))
    return _build_nominal(value)


def _build_nominal(value: Value):
    if isinstance(value, Symbol):
        if value.name == EMPTY:
            return None
        if value.name.startswith("?"):
            return NounPhraseNode(head=PronounHead(lemma=value.name))
        raise NotationError(f"Unexpected symbol {value.name!r}", value.offset)

    if isinstance(value, Literal):
        return NounPhraseNode(head=PronounHead(lemma=value.text))

    call = _call(value, "a noun phrase")
    if call.name == "noun":
        return _build_noun(call)
    if call.name == "pronoun":
        return _build_pronoun(call)
    if call.name in ("and", "or", "?which"):
        conjuncts = tuple(_build_nominal(v) for v in _positional(call, len(call.args)))
        choice = call.name == "?which"
        return CoordinatedNounPhraseNode(
            conjunction=Conjunction.OR if choice else Conjunction(call.name),
            conjuncts=conjuncts,
            choice=choice,
        )
    raise NotationError(f"Unknown noun phrase wrapper {call.name!r}", call.offset)


def _build_adjectives(value: Value) -> Tuple[str, ...]:
    if isinstance(value, ListValue):
        return tuple(_literal(v) for v in value.items)
    return (_literal(value),)


def _build_pp(call: Call) -> PrepositionalPhraseNode:
    prep, obj = _positional(call, 2)
    return PrepositionalPhraseNode(preposition=_literal(prep), object=_build_nominal(obj))


def _build_noun(call: Call) -> NounPhraseNode:
    pre = central = post = head = None
    adjectives: Tuple[str, ...] = ()
    modifier = None
    for arg in call.args:
        if arg.key == "pre":
            pre = _literal(arg.value)
        elif arg.key == "det":
            central = _literal(arg.value)
        elif arg.key == "post" and isinstance(arg.value, Call) and arg.value.name == "pp":
            modifier = _build_pp(arg.value)
        elif arg.key == "post" and isinstance(arg.value, Symbol) and arg.value.name in (PLURAL, UNCOUNTABLE):
            post = arg.value.name
        elif arg.key == "post":
            post = _literal(arg.value)
        elif arg.key == "adj":
            adjectives = _build_adjectives(arg.value)
        elif arg.key == "head":
            head = _literal(arg.value)
        else:
            raise NotationError(f"Unknown noun() argument {arg.key!r}", _offset(arg.value))
    if head is None:
        raise NotationError("noun() needs head:", call.offset)
    return NounPhraseNode(
        head=NounHead(lemma=head),
        determiners=DeterminerConfig(pre=pre, central=central, post=post),
        adjectives=adjectives,
        prep_modifier=modifier,
    )


def _build_pronoun(call: Call) -> NounPhraseNode:
    if not call.args or call.args[0].key is not None:
        raise NotationError("pronoun() starts with the pronoun itself", call.offset)
    head_value = call.args[0].value
    if isinstance(head_value, Symbol) and head_value.name.startswith("?"):
        lemma = head_value.name
    else:
        lemma = _literal(head_value)

    adjectives: Tuple[str, ...] = ()
    modifier = None
    for arg in call.args[1:]:
        if arg.key == "adj":
            adjectives = _build_adjectives(arg.value)
        elif arg.key == "post" and isinstance(arg.value, Call) and arg.value.name == "pp":
            modifier = _build_pp(arg.value)
        else:
            raise NotationError(f"Unknown pronoun() argument {arg.key!r}", _offset(arg.value))
    return NounPhraseNode(head=PronounHead(lemma=lemma), adjectives=adjectives, prep_modifier=modifier)


def _build_proposition(call: Call) -> PropositionNode:
    op = _enum(LogicOperator, call.name, call.offset)
    if op is LogicOperator.IF or op is LogicOperator.BECAUSE:
        keyword = "then" if op is LogicOperator.IF else "effect"
        if len(call.args) != 2 or call.args[0].key is not None or call.args[1].key != keyword:
            raise NotationError(f"{op.value}() takes a cause and {keyword}:", call.offset)
        values = [call.args[0].value, call.args[1].value]
    else:
        values = _positional(call, len(call.args))
    return PropositionNode(operator=op, operands=tuple(_build_operand(v) for v in values))


def _build_operand(value: Value):
    if isinstance(value, Symbol) and value.name == EMPTY:
        return None
    call = _call(value, "a clause or a logical operator")
    if call.name in _LOGIC_NAMES:
        return _build_proposition(call)
    return _build_clause(call)


def _question_type(clause: ClauseNode) -> SentenceType:
    vp = clause.verb_phrase
    fillers = [a.filler for a in vp.arguments]
    if any(a.is_interrogative for a in vp.adverbs) or any(
        isinstance(f, NounPhraseNode) and isinstance(f.head, PronounHead) and f.head.is_interrogative for f in fillers
    ):
        return SentenceType.WH_QUESTION
    if any(isinstance(f, CoordinatedNounPhraseNode) and f.choice for f in fillers):
        return SentenceType.CHOICE_QUESTION
    return SentenceType.YES_NO_QUESTION


__all__ = ["to_notation", "parse_notation", "parse_tree", "Call", "Arg", "Literal", "Symbol", "ListValue"]
