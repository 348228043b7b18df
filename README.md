# cerbotor

Certify model checking witnesses for circuits written in the BTOR2 format.

You give `cerbotor` a model circuit and a witness circuit that claims to show
the model safe. The witness is a circuit whose safety is checked inductively
and which simulates the model. `cerbotor` writes five BTOR2 circuits, each
ending in a single `bad` property. If every one of those bad properties is
unreachable, the witness is certified.

The five checks are:

| File               | Condition checked                                   |
|--------------------|-----------------------------------------------------|
| `reset.btor2`      | The model's reset implies the witness's reset       |
| `transition.btor2` | The model's transition implies the witness's        |
| `property.btor2`   | A model violation implies a witness violation       |
| `base.btor2`       | The witness property holds in reset states          |
| `step.btor2`       | The witness property is inductive                   |

In every output circuit the states of the copied circuits are written as
inputs. The transition and step checks also hold a second, shifted copy of
the circuits standing for the next time step. The final `bad` line of each
file is written without a trailing newline.

## Installation

```
pip install .
```

## Usage

```
cerbotor <model.btor2> <witness.btor2> [reset transition property base step]
```

The paths of the five output circuits are optional. Any you leave out take
the default names shown above and are written to the current directory.
Progress messages are printed to standard output. If a circuit cannot be read
or parsed, an error is printed to standard error and the exit status is 1;
wrong arguments print the usage line and also exit with status 1.

```
cerbotor --version
```

prints the version.

The command can also be run as `python -m cerbotor.cli`.

### Linking witness to model

A state or input in the witness with the symbol `=<id>` simulates the model
line with that id. If no state or input in the witness has such a symbol, the
inputs of the witness are paired with the inputs of the model in order, and
the states likewise.

## Library use

```python
from cerbotor.btor2 import Btor2
from cerbotor.cli import index_consecutively, reset

model = Btor2("model.btor2")
witness = Btor2("witness.btor2")
shared = index_consecutively(witness, model)
reset("reset.btor2", witness, model, shared)
```

The other checks are `transition`, `check_property`, `base` and `step` in
`cerbotor.cli`. `Btor2.from_text` builds a circuit from a string, and `str()`
of a circuit writes it back in BTOR2 syntax. Failures to open, parse or
renumber a circuit raise `cerbotor.btor2.Btor2Error`.

`cerbotor.encoding.Encoding` is the writer behind the checks: a context
manager over an output file with methods such as `band`, `bor`, `band_all`,
`bor_all`, `bnot`, `beq`, `bbad`, `next` and `unroll`, each returning the id
of the line it adds.

## What it does not do

`cerbotor` does not solve anything itself and runs no other program. To
finish a certification, check the five written circuits with a BTOR2 model
checker or SMT-based tool of your choice.

## Running the tests

```
pip install .[test]
pytest
```