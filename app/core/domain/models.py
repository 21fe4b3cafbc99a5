# app/core/domain/models.py
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.core.domain.determiners import Selections, Slot, find_conflicts, is_known_value


class _Node(BaseModel):
    """Immutable AST node. Built fresh per editor change, read-only to the engine."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# --- Enums ---

class SentenceType(str, Enum):
    DECLARATIVE = "declarative"
    YES_NO_QUESTION = "yes_no_question"
    WH_QUESTION = "wh_question"
    CHOICE_QUESTION = "choice_question"
    IMPERATIVE = "imperative"
    MODAL = "modal"
    NEGATED_MODAL = "negated_modal"
    FACT = "fact"


class Tense(str, Enum):
    PAST = "past"
    PRESENT = "present"
    FUTURE = "future"


class Aspect(str, Enum):
    SIMPLE = "simple"
    PROGRESSIVE = "progressive"
    PERFECT = "perfect"
    PERFECT_PROGRESSIVE = "perfect_progressive"


class Polarity(str, Enum):
    AFFIRMATIVE = "affirmative"
    NEGATIVE = "negative"


class ModalKind(str, Enum):
    ABILITY = "ability"          # can / could
    PERMISSION = "permission"    # may / could
    POSSIBILITY = "possibility"  # might
    OBLIGATION = "obligation"    # must / had to
    CERTAINTY = "certainty"      # must
    ADVICE = "advice"            # should
    VOLITION = "volition"        # will / was going to
    PREDICTION = "prediction"    # will / would


class SemanticRole(str, Enum):
    AGENT = "agent"
    PATIENT = "patient"
    THEME = "theme"
    EXPERIENCER = "experiencer"
    STIMULUS = "stimulus"
    RECIPIENT = "recipient"
    BENEFICIARY = "beneficiary"
    POSSESSOR = "possessor"
    LOCATION = "location"
    GOAL = "goal"
    SOURCE = "source"
    INSTRUMENT = "instrument"
    ATTRIBUTE = "attribute"
    PLACE = "place"


class Conjunction(str, Enum):
    AND = "and"
    OR = "or"


class AdverbType(str, Enum):
    MANNER = "manner"
    FREQUENCY = "frequency"
    DEGREE = "degree"
    TIME = "time"
    PLACE = "place"


class LogicOperator(str, Enum):
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    IF = "IF"
    BECAUSE = "BECAUSE"


# --- Heads & modifiers ---

class NounHead(_Node):
    kind: Literal["noun"] = "noun"
    lemma: str


class PronounHead(_Node):
    kind: Literal["pronoun"] = "pronoun"
    lemma: str

    @property
    def is_interrogative(self) -> bool:
        return self.lemma.startswith("?")


class DeterminerConfig(_Node):
    """
    PRE / CENTRAL / POST determiner slots of one noun phrase.

    The plural / uncountable marker lives in `post`. A combination the
    exclusion table forbids cannot be constructed.
    """

    pre: Optional[str] = None
    central: Optional[str] = None
    post: Optional[str] = None

    @model_validator(mode="after")
    def _check_exclusions(self) -> "DeterminerConfig":
        selections = self.selections()
        for slot in Slot:
            if not is_known_value(slot, selections.get(slot)):
                raise ValueError(f"Unknown {slot.value} determiner: {selections.get(slot)!r}")
        conflicts = find_conflicts(selections)
        if conflicts:
            slot, value, other, other_value = conflicts[0]
            raise ValueError(
                f"Determiner {value!r} ({slot.value}) cannot be combined "
                f"with {other_value!r} ({other.value})"
            )
        return self

    def selections(self) -> Selections:
        return Selections(pre=self.pre, central=self.central, post=self.post)

    @property
    def is_empty(self) -> bool:
        return self.pre is None and self.central is None and self.post is None


class AdjectivePhraseNode(_Node):
    """Predicative adjective phrase, e.g. "very happy"."""

    kind: Literal["adjective"] = "adjective"
    lemma: str
    degree: Optional[str] = None


class AdverbNode(_Node):
    lemma: str
    # Resolved from the lexicon when omitted
    type: Optional[AdverbType] = None

    @property
    def is_interrogative(self) -> bool:
        return self.lemma.startswith("?")


class PrepositionalPhraseNode(_Node):
    kind: Literal["pp"] = "pp"
    preposition: str
    object: Optional["NominalFiller"] = None


class NounPhraseNode(_Node):
    kind: Literal["noun_phrase"] = "noun_phrase"
    head: Annotated[Union[NounHead, PronounHead], Field(discriminator="kind")]
    determiners: DeterminerConfig = Field(default_factory=DeterminerConfig)
    adjectives: Tuple[str, ...] = ()
    prep_modifier: Optional[PrepositionalPhraseNode] = None

    @model_validator(mode="after")
    def _pronouns_take_no_determiners(self) -> "NounPhraseNode":
        if isinstance(self.head, PronounHead) and not self.determiners.is_empty:
            raise ValueError("Pronoun heads never take determiners")
        return self


class CoordinatedNounPhraseNode(_Node):
    """
    2..n conjuncts joined by and/or. A None conjunct is a slot left empty
    in the editor. `choice` marks the alternatives of a choice question.
    """

    kind: Literal["coordinated"] = "coordinated"
    conjunction: Conjunction = Conjunction.AND
    conjuncts: Tuple[Optional["NominalFiller"], ...] = Field(min_length=2)
    choice: bool = False


NominalFiller = Annotated[
    Union[NounPhraseNode, CoordinatedNounPhraseNode],
    Field(discriminator="kind"),
]

Filler = Annotated[
    Union[NounPhraseNode, CoordinatedNounPhraseNode, AdjectivePhraseNode],
    Field(discriminator="kind"),
]


# --- Verb phrases & clauses ---

class VerbRef(_Node):
    lemma: str


class FilledArgument(_Node):
    role: SemanticRole
    # None = slot left empty in the editor
    filler: Optional[Filler] = None


class VerbCoordination(_Node):
    conjunction: Conjunction = Conjunction.AND
    verb_phrase: "VerbPhraseNode"


class VerbPhraseNode(_Node):
    verb: VerbRef
    arguments: Tuple[FilledArgument, ...] = ()
    adverbs: Tuple[AdverbNode, ...] = ()
    prepositional_phrases: Tuple[PrepositionalPhraseNode, ...] = ()
    coordinated_with: Optional[VerbCoordination] = None

    def argument(self, role: Union[SemanticRole, str]) -> Optional[FilledArgument]:
        key = role.value if isinstance(role, SemanticRole) else role
        for arg in self.arguments:
            if arg.role.value == key:
                return arg
        return None

    def chain(self) -> List[Tuple[Optional[Conjunction], "VerbPhraseNode"]]:
        """This phrase followed by every phrase coordinated after it."""
        items: List[Tuple[Optional[Conjunction], VerbPhraseNode]] = [(None, self)]
        current = self
        while current.coordinated_with is not None:
            items.append((current.coordinated_with.conjunction, current.coordinated_with.verb_phrase))
            current = current.coordinated_with.verb_phrase
        return items


class ClauseNode(_Node):
    kind: Literal["clause"] = "clause"
    verb_phrase: VerbPhraseNode
    tense: Tense = Tense.PRESENT
    aspect: Aspect = Aspect.SIMPLE
    polarity: Polarity = Polarity.AFFIRMATIVE
    modal: Optional[ModalKind] = None
    modal_polarity: Polarity = Polarity.AFFIRMATIVE


class PropositionNode(_Node):
    """
    Logical fact: AND/OR over 2..n operands, NOT over one, IF/BECAUSE over two.

    An operand left as None is an empty slot and renders as the placeholder.
    """

    kind: Literal["proposition"] = "proposition"
    operator: LogicOperator
    operands: Tuple[Optional[Annotated[Union[ClauseNode, "PropositionNode"], Field(discriminator="kind")]], ...]

    @model_validator(mode="after")
    def _check_arity(self) -> "PropositionNode":
        n = len(self.operands)
        if self.operator is LogicOperator.NOT and n != 1:
            raise ValueError("NOT takes exactly one operand")
        if self.operator in (LogicOperator.IF, LogicOperator.BECAUSE) and n != 2:
            raise ValueError(f"{self.operator.value} takes exactly two operands")
        if self.operator in (LogicOperator.AND, LogicOperator.OR) and n < 2:
            raise ValueError(f"{self.operator.value} takes at least two operands")
        return self


class SentenceNode(_Node):
    sentence_type: SentenceType = SentenceType.DECLARATIVE
    clause: Optional[ClauseNode] = None
    proposition: Optional[PropositionNode] = None
    time_adverbial: Optional[str] = None

    @model_validator(mode="after")
    def _one_body(self) -> "SentenceNode":
        if self.clause is None and self.proposition is None:
            raise ValueError("A sentence needs a clause or a proposition")
        if self.clause is not None and self.proposition is not None:
            raise ValueError("A sentence has either a clause or a proposition, not both")
        if self.proposition is not None and self.sentence_type is not SentenceType.FACT:
            raise ValueError("Propositions are only rendered as facts")
        return self


# --- API Payloads ---

class RenderRequest(BaseModel):
    """Input payload for the render endpoint: one workspace of sentences."""

    sentences: List[SentenceNode] = Field(default_factory=list)
    include_derivations: bool = True
    target: Literal["en", "ja"] = "en"


class NotationRenderRequest(BaseModel):
    """Same as RenderRequest, with sentences written in compact notation."""

    sentences: List[str] = Field(default_factory=list)
    include_derivations: bool = True
    target: Literal["en", "ja"] = "en"


class RenderResponse(BaseModel):
    sentences: List[str]
    logs: List[Dict[str, Any]]
    derivations: List[Dict[str, Any]] = Field(default_factory=list)


for _model in (
    PrepositionalPhraseNode,
    NounPhraseNode,
    CoordinatedNounPhraseNode,
    FilledArgument,
    VerbCoordination,
    VerbPhraseNode,
    ClauseNode,
    PropositionNode,
    SentenceNode,
):
    _model.model_rebuild()
