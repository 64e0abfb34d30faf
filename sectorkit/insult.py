"""A random sentence generator driven by a fixed insult grammar."""

from __future__ import annotations

import random
import string
import sys
from typing import Sequence

DEFAULT_SEED = 4951
DEFAULT_COUNT = 4

_USAGE = (
    "\n"
    "Usage: insult [OPTION]...\n"
    "Prints random insults to screen.\n\n"
    "  -h:               this help message\n"
    "  -s <integer>:     set the random seed (default 4951)\n"
    "  -n <integer>:     choose number of insults (default 4)\n"
    "  -f <file>:        redirect output to <file>\n"
)

Rule = tuple[tuple[str, ...], ...]


def _rule(words: Sequence[str], bounds: Sequence[int]) -> Rule:
    """Split WORDS into alternatives at the given boundary indexes."""
    return tuple(tuple(words[a:b]) for a, b in zip(bounds, bounds[1:]))


def _seq(count: int) -> range:
    return range(count + 1)


GRAMMAR: tuple[Rule, ...] = (
    # 0: start
    _rule(
        ("You", "1", "5", ".", "May", "13", ".", "With", "the", "19", "of",
         "18", ",", "may", "13", "."),
        (0, 4, 7, 16),
    ),
    # 1: adj
    _rule(("3", "4", "2", ",", "1"), (0, 1, 2, 5)),
    # 2: adj3
    _rule(("3", "4"), (0, 1, 2)),
    # 3: adj1
    _rule(
        ("lame", "dried", "up", "par-broiled", "bloated", "half-baked",
         "spiteful", "egotistical", "ungrateful", "stupid", "moronic", "fat",
         "ugly", "puny", "pitiful", "insignificant", "blithering",
         "repulsive", "worthless", "blundering", "retarded", "useless",
         "obnoxious", "low-budget", "assinine", "neurotic", "subhuman",
         "crochety", "indescribable", "contemptible", "unspeakable", "sick",
         "lazy", "good-for-nothing", "slutty", "mentally-deficient",
         "creepy", "sloppy", "dismal", "pompous", "pathetic", "friendless",
         "revolting", "slovenly", "cantankerous", "uncultured",
         "insufferable", "gross", "unkempt", "defective", "crumby"),
        (0, 1, *range(3, 52)),
    ),
    # 4: adj2
    _rule(
        ("putrefied", "festering", "funky", "moldy", "leprous", "curdled",
         "fetid", "slimy", "crusty", "sweaty", "damp", "deranged", "smelly",
         "stenchy", "malignant", "noxious", "grimy", "reeky", "nasty",
         "mutilated", "sloppy", "gruesome", "grisly", "sloshy", "wormy",
         "mealy", "spoiled", "contaminated", "rancid", "musty",
         "fly-covered", "moth-eaten", "decaying", "decomposed",
         "freeze-dried", "defective", "petrified", "rotting", "scabrous",
         "hirsute"),
        _seq(40),
    ),
    # 5: name
    _rule(
        ("10", ",", "bad", "excuse", "for", "6", ",", "6", "for", "brains",
         ",", "4", "11", "8", "for", "brains", "offspring", "of", "a",
         "motherless", "10", "7", "6", "7", "4", "11", "8"),
        (0, 1, 6, 10, 16, 21, 23, 27),
    ),
    # 6: stuff
    _rule(
        ("shit", "toe", "jam", "filth", "puss", "earwax", "leaf",
         "clippings", "bat", "guano", "mucus", "fungus", "mung", "refuse",
         "earwax", "spittoon", "spittle", "phlegm"),
        (0, 1, 3, 4, 5, 6, 8, 10, 11, 12, 13, 14, 15, 17, 18),
    ),
    # 7: noun_and_prep
    _rule(
        ("bit", "of", "piece", "of", "vat", "of", "lump", "of", "crock",
         "of", "ball", "of", "tub", "of", "load", "of", "bucket", "of",
         "mound", "of", "glob", "of", "bag", "of", "heap", "of", "mountain",
         "of", "load", "of", "barrel", "of", "sack", "of", "blob", "of",
         "pile", "of", "truckload", "of", "vat", "of"),
        range(0, 43, 2),
    ),
    # 8: organics
    _rule(
        ("droppings", "mung", "zits", "puckies", "tumors", "cysts",
         "tumors", "livers", "froth", "parts", "scabs", "guts", "entrails",
         "blubber", "carcuses", "gizards", "9"),
        _seq(17),
    ),
    # 9: body_parts
    _rule(
        ("kidneys", "genitals", "buttocks", "earlobes", "innards", "feet"),
        _seq(6),
    ),
    # 10: noun
    _rule(
        ("pop", "tart", "warthog", "twinkie", "barnacle", "fondue", "pot",
         "cretin", "fuckwad", "moron", "ass", "neanderthal", "nincompoop",
         "simpleton", "11"),
        (0, 2, 3, 4, 5, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    ),
    # 11: animal
    _rule(
        ("donkey", "llama", "dingo", "lizard", "gekko", "lemur", "moose",
         "camel", "goat", "eel"),
        _seq(10),
    ),
    # 12: good_verb
    _rule(
        ("love", "cuddle", "fondle", "adore", "smooch", "hug", "caress",
         "worship", "look", "at", "touch"),
        (0, 1, 2, 3, 4, 5, 6, 7, 8, 10, 11),
    ),
    # 13: curse
    _rule(
        ("14", "20", "23", "14", "17", "20", "23", "14", "find", "your", "9",
         "suddenly", "delectable", "14", "and", "14", "seek", "a",
         "battleground", "23"),
        (0, 3, 7, 13, 20),
    ),
    # 14: afflictors
    _rule(
        ("15", "21", "15", "21", "15", "21", "15", "21", "a", "22", "Rush",
         "Limbaugh", "the", "hosts", "of", "Hades"),
        (0, 2, 4, 6, 8, 12, 16),
    ),
    # 15: quantity
    _rule(
        ("a", "4", "hoard", "of", "a", "4", "pack", "of", "a", "truckload",
         "of", "a", "swarm", "of", "many", "an", "army", "of", "a", "4",
         "heard", "of", "a", "4", "platoon", "of", "a", "4", "and", "4",
         "group", "of", "16"),
        (0, 4, 8, 11, 14, 15, 18, 22, 26, 32, 33),
    ),
    # 16: numbers
    _rule(
        ("a", "thousand", "three", "million", "ninty-nine", "nine-hundred,",
         "ninty-nine", "forty-two", "a", "gazillion", "sixty-eight",
         "times", "thirty-three"),
        (0, 2, 4, 5, 7, 8, 10, 13),
    ),
    # 17: adv
    _rule(
        ("viciously", "manicly", "merrily", "happily", ",", "with", "the",
         "19", "of", "18", ",", "gleefully", ",", "with", "much",
         "ritualistic", "celebration", ",", "franticly"),
        (0, 1, 2, 3, 4, 11, 12, 18, 19),
    ),
    # 18: metaphor
    _rule(
        ("an", "irate", "manticore", "Thor's", "belch", "Alah's", "fist",
         "16", "titans", "a", "particularly", "vicious", "she-bear", "in",
         "the", "midst", "of", "her", "menstrual", "cycle", "a",
         "pissed-off", "Jabberwock"),
        (0, 3, 5, 7, 9, 20, 23),
    ),
    # 19: force
    _rule(("force", "fury", "power", "rage"), _seq(4)),
    # 20: bad_action
    _rule(
        ("spit", "shimmy", "slobber", "find", "refuge", "find", "shelter",
         "dance", "retch", "vomit", "defecate", "erect", "a", "strip",
         "mall", "build", "a", "26", "have", "a", "religious", "experience",
         "discharge", "bodily", "waste", "fart", "dance", "drool",
         "lambada", "spill", "16", "rusty", "tacks", "bite", "you",
         "sneeze", "sing", "16", "campfire", "songs", "smite", "you", "16",
         "times", "construct", "a", "new", "home", "throw", "a", "party",
         "procreate"),
        (0, 1, 2, 3, 5, 7, 8, 9, 10, 11, 15, 18, 22, 25, 26, 27, 28, 29,
         33, 35, 36, 40, 44, 48, 51, 52),
    ),
    # 21: beasties
    _rule(
        ("yaks", "22", "maggots", "22", "cockroaches", "stinging",
         "scorpions", "fleas", "22", "weasels", "22", "gnats", "South",
         "American", "killer", "bees", "spiders", "4", "monkeys", "22",
         "wiener-dogs", "22", "rats", "22", "wolverines", "4", ",", "22",
         "pit-fiends"),
        (0, 1, 3, 5, 7, 8, 10, 12, 16, 17, 19, 21, 23, 25, 29),
    ),
    # 22: condition
    _rule(
        ("frothing", "manic", "crazed", "plague-ridden", "disease-carrying",
         "biting", "rabid", "blood-thirsty", "ravaging", "slavering"),
        _seq(10),
    ),
    # 23: place
    _rule(
        ("in", "24", "25", "upon", "your", "mother's", "grave", "on", "24",
         "best", "rug", "in", "the", "26", "you", "call", "home", "upon",
         "your", "heinie"),
        (0, 3, 7, 11, 17, 20),
    ),
    # 24: relation
    _rule(
        ("your", "your", "your", "your", "father's", "your", "mother's",
         "your", "grandma's"),
        (0, 1, 2, 3, 5, 7, 9),
    ),
    # 25: in_something
    _rule(
        ("entrails", "anal", "cavity", "shoes", "house", "pantry",
         "general", "direction", "pants", "bed"),
        (0, 1, 3, 4, 5, 6, 8, 9, 10),
    ),
    # 26: bad_place
    _rule(
        ("rat", "hole", "sewer", "toxic", "dump", "oil", "refinery",
         "landfill", "porto-pottie"),
        (0, 2, 3, 5, 7, 8, 9),
    ),
)
"""Grammar rules; each is a tuple of alternatives, each a tuple of symbols.

A symbol made of digits names another rule to expand in its place.
"""


class UsageError(Exception):
    """Raised for bad command-line options, or for -h with status 0."""

    def __init__(self, message: str | None, status: int = 1) -> None:
        super().__init__(message or "")
        self.message = message
        self.status = status


def _expand_into(num: int, rng: random.Random, out: list[str]) -> None:
    alternatives = GRAMMAR[num]
    for word in alternatives[rng.randrange(len(alternatives))]:
        if word[0].isdigit():
            _expand_into(int(word), rng, out)
        else:
            if word[0] not in string.punctuation:
                out.append(" ")
            out.append(word)


def expand(num: int, rng: random.Random) -> str:
    """Expand grammar rule NUM with choices drawn from RNG.

    Each word is preceded by a space unless it begins with punctuation.
    """
    if not 0 <= num < len(GRAMMAR):
        raise ValueError(f"no grammar rule {num}")
    out: list[str] = []
    _expand_into(num, rng, out)
    return "".join(out)


def generate(seed: int = DEFAULT_SEED, count: int = DEFAULT_COUNT) -> str:
    """Return COUNT insults generated from SEED, laid out as printed."""
    rng = random.Random(seed)
    parts = ["\n"]
    for _ in range(count):
        parts.append("\n" + expand(0, rng) + "\n\n")
    return "".join(parts)


def _atoi(text: str) -> int:
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for ch in text:
        if not ("0" <= ch <= "9"):
            break
        digits += ch
    return sign * int(digits) if digits else 0


def parse_args(argv: Sequence[str]) -> tuple[int, int, str | None]:
    """Parse options and return (seed, count, output path or None).

    Only a first argument of -h asks for help.
    """
    seed, count, output = DEFAULT_SEED, DEFAULT_COUNT, None
    seen: set[str] = set()
    duplicate = {
        "-s": "Can't have more than one seed",
        "-n": "Can't have more than one sentence option",
        "-f": "Can't have more than one output file",
    }
    args = iter(argv)
    for arg in args:
        if argv[0] == "-h":
            raise UsageError(None, 0)
        if arg not in duplicate:
            raise UsageError("Unrecognized flag")
        if arg in seen:
            raise UsageError(duplicate[arg])
        seen.add(arg)
        value = next(args, None)
        if value is None:
            raise UsageError(f"Missing value for {arg}")
        if arg == "-s":
            seed = _atoi(value)
        elif arg == "-n":
            count = _atoi(value)
            if count < 1:
                raise UsageError("Must have at least one sentence")
        else:
            output = value
    return seed, count, output


def main(argv: Sequence[str] | None = None) -> int:
    """Run the insult generator and return the exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        seed, count, output = parse_args(argv)
    except UsageError as exc:
        if exc.message:
            sys.stdout.write(exc.message)
        sys.stdout.write(_USAGE)
        return exc.status

    text = generate(seed, count)
    if output is None:
        sys.stdout.write(text)
        return 0
    try:
        with open(output, "w", encoding="utf-8") as handle:
            handle.write(text)
    except OSError:
        print(f"{output}: open failed")
        return 1
    return 0