# kmdiff

Building blocks for differential k-mer analysis between a group of control
samples and a group of case samples: a Poisson likelihood-ratio test for
k-mer counts, multiple-testing corrections, accumulators and aggregators
that collect test results and write the significant k-mers per group, a
small logistic regression toolkit, and a command-line parser for the
`count` and `diff` settings.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Command line

The `kmdiff` command has three subcommands:

```
kmdiff count --file samples.fof --run-dir run_dir --kmer-size 31
kmdiff diff --km-run run_dir --nb-controls 10 --nb-cases 10 --correction bonferroni
kmdiff infos
```

- `count` checks its arguments (`--file` must be an existing file,
  `--kmer-size` must lie in `[8, 127]`, default `31`) and prints the
  resulting count options.
- `diff` checks its arguments and prints the resulting diff options.
  `--km-run` must be a directory holding a `kmtricks.fof` file. It accepts
  a significance threshold (`-s`, in `[0.0, 0.5]`, default `0.05`), a
  cutoff (`-u`, default `100000`) and one of the corrections `bonferroni`
  (default), `benjamini`, `sidak`, `holm` or `disabled`. Choosing
  `benjamini` or `holm`, or passing `-m/--in-memory`, logs a warning.
- `infos` prints host, Python and version information to standard error.

`kmdiff --help` and `kmdiff --version` print to standard error and exit
with status 1, as does any invalid argument. Run `kmdiff <command> --help`
for the options of one subcommand.

## Library

Significance corrections (`kmdiff.correction`):

```python
from kmdiff.correction import CorrectionType, make_corrector

corrector = make_corrector(CorrectionType.BONFERRONI, 0.05, 1_000_000)
corrector.apply(1e-9)   # True
```

`Bonferroni`, `Sidak` and `BasicThreshold` judge each p-value on its own.
`Benjamini` and `Holm` keep state and expect p-values in increasing order.

The Poisson likelihood model (`kmdiff.model`):

```python
from kmdiff.model import PoissonLikelihood

model = PoissonLikelihood(2, 2, [1000, 1000], [1000, 1000], 10000)
pvalue, significance, mean_control, mean_case = model.process([0, 1], [40, 52])
```

`significance` is a `Significance` member (`NO`, `CONTROL` or `CASE`).
`chisquare_sf` gives the one-degree-of-freedom chi-square tail used for
the p-value.

Other modules:

- `kmdiff.aggregator`: `SignificantKmer` records; `Aggregator` filters
  each partition with a stateless corrector, `SortedAggregator` sorts all
  k-mers by p-value and keeps them until the corrector rejects one.
  Both write `control_kmers.fasta` and `case_kmers.fasta` in the output
  directory. `make_aggregator` picks the right one for a corrector, and
  `write_kmers` writes FASTA records on its own.
- `kmdiff.accumulator`: `VectorAccumulator` (keeps order and duplicates),
  `SetAccumulator` (keeps distinct items) and `FileAccumulator` (stores
  items in a gzip-compressed file). All replay their items through `get`
  or iteration after `finish`. `partitions_exist` checks that every
  partition file named by a format string is present.
- `kmdiff.linear_model`: small dense matrix helpers, LU inversion and
  logistic regression by Newton–Raphson (`glm_newton_raphson`) or IRLS
  (`glm_irls`), both returning a `GlmResult`.
- `kmdiff.log_factorial`: `log_factorial` and a precomputed
  `LogFactorialTable`.
- `kmdiff.options`: `CountOptions` and `DiffOptions` records with their
  `display` text, and `dump_opt`, `load_opt` and `compare_opt` to store
  the settings of a run and tell which steps a new run must redo.
- `kmdiff.kmtricks_utils`: `get_kmtricks_config` reads the k-mer size and
  minimum abundance from `<run_dir>/kmdiff-count.opt` and the number of
  partitions from `<run_dir>/counts`, raising `ConfigError` when either is
  missing.
- `kmdiff.popstrat`: writers for EIGENSTRAT genotype (`EigGenoFile`) and
  SNP (`EigSnpFile`) files, and a seeded `Sampler` that records a random
  fraction of k-mers in them.

## What this package does not do

- It does not count k-mers, and it does not read the per-partition count
  files or histograms of a counted run.
- The `count` and `diff` commands only validate their arguments and print
  the resulting options; they do not run a counting or analysis pipeline.
- It does not run a principal component analysis or apply a population
  stratification correction; `kmdiff.popstrat` only prepares the input
  files for one.
- Significant k-mers are written as FASTA only; the `--kff-output` flag is
  accepted but no KFF writer exists.