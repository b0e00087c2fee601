# filequery

A small library for matching file and folder entries against a search query.
It turns a query into an expression tree and matches entries against it. It
can also record which parts of an entry's name, path, size or extension
matched, so that a front end can show them in bold.

## Installing

```
pip install .
```

## What it does not do

- It has no tokenizer for raw query strings. A query reaches the library as a
  sequence of tokens: `Token` kinds, each with an optional string value. A
  `TokenStream` walks over such a sequence. Splitting the text a user typed
  into words, fields, operators and brackets is left to the caller.
- It does not scan the file system or keep a database of entries. Entries are
  `Entry` objects built by the caller.
- It has no command line and no user interface.

## Query language (as tokens)

- `Token.WORD` terms match the entry name. With `QueryFlag.SEARCH_IN_PATH`
  they match the full path instead. With `QueryFlag.AUTO_SEARCH_IN_PATH` they
  match the full path when the word contains `/`.
- `QueryFlag.AUTO_MATCH_CASE` turns on case-sensitive matching for words that
  contain an upper-case letter.
- Words containing `*` or `?` are wildcard patterns. They are anchored, so they
  must match the whole name (or path).
- `QueryFlag.REGEX` treats terms as regular expressions. A `Query` with this
  flag passes the whole search term to the regex engine as one term. A pattern
  that does not compile matches nothing.
- `Token.AND`, `Token.OR`, `Token.NOT` and `Token.BRACKET_OPEN` /
  `Token.BRACKET_CLOSE` combine terms.
  - Precedence from highest to lowest is NOT, AND, OR.
  - Adjacent terms are joined by an implicit AND.
  - Consecutive NOTs cancel in pairs.
  - A closing bracket without a matching open one is ignored.
- A `Token.FIELD` names a field. The token after it is the field's argument.
  - `case`, `nocase`, `exact`, `path`, `nopath`, `regex` and `noregex` set or
    clear a flag for the following term.
  - `file`/`files` restrict the following term to files, and
    `folder`/`folders` restrict it to folders.
  - `ext` takes a `;`-separated list of extensions. Without a word argument it
    matches entries that have no extension.
  - `size` takes a size such as `10`, `3k` or `2GB`. The letters `k`, `m`, `g`
    and `t` multiply by powers of 1000 and may be followed by `b`.
    - It can also take a range: `10k..2m`, `10k-2m`, or `10k..` / `10k-`, the
      last two meaning "at least".
    - It can also take a comparison token (`Token.SMALLER`,
      `Token.SMALLER_EQ`, `Token.GREATER`, `Token.GREATER_EQ`) followed by a
      size word.
    - An invalid size matches everything.
  - Unknown fields match everything.

## Modules

- `filequery.tokens`: the `Token` kinds, the `QueryFlag` options and
  `TokenStream`, which provides `peek()` and `next()` and yields `Token.EOS`
  once the tokens run out.
- `filequery.match_context`:
  - `Entry` holds a name, a parent path, a type, a size and an mtime, and has
    an `extension()` method.
  - `EntryType` and `IndexType` are enums for entry kinds and display columns.
  - `Highlight` is a span; an `end` of `None` means "to the end".
  - `MatchContext` computes the full path and the folded strings lazily and
    collects highlights per `IndexType`. Spans that overlap or touch are
    merged.
  - `fold()` case-folds and NFD-normalises text, with dotted/dotless i
    handling under Turkish or Azerbaijani locales.
- `filequery.node`:
  - the term nodes `TextNode`, `RegexNode`, `SizeNode`, `ExtensionNode`,
    `MatchEverythingNode` and `OperatorNode`, with the `Comparison` and
    `Operator` enums;
  - `create_node`, `create_regex_node` and `wildcard_to_regex`.
  - Case-insensitive matching of non-ASCII text compares folded strings. It
    does not record highlights.
- `filequery.fields`: `parse_field`, `parse_modifier`, `parse_size`,
  `parse_size_with_range` and `parse_size_prefix`.
- `filequery.tree`:
  - `TreeNode`;
  - `to_postfix` and `tree_from_postfix`, combined in `build_tree`, which
    accepts a `TokenStream` or a plain list of tokens;
  - `regex_tree`.
- `filequery.query`:
  - `Query` ties together a search term, its tokens, the flags and an optional
    `Filter`.
  - A `Filter` has a `FilterType` and an optional query with its own tokens
    and flags.
  - `Query` provides `match()`, `highlight()` and `matches_everything()`.
  - `evaluate()` runs a tree against a `MatchContext`.
- `filequery.selection`: `Selection` is a set of items compared by identity.
  It supports `toggle`, `select`, `select_all`, `invert`, `clear`, `in`,
  `len()` and iteration in selection order.
- `filequery.memory_pool`: `MemoryPool` creates items from a factory in
  fixed-size blocks.
  - `release()` hands items back; they are reused last-released-first.
  - `close()`, which also runs on leaving a `with` block, passes every created
    item to the optional free function.

## Example

```python
from filequery.match_context import Entry, EntryType, IndexType, MatchContext
from filequery.query import Query
from filequery.tokens import QueryFlag, Token

tokens = [(Token.WORD, "report"), (Token.AND, None), (Token.FIELD, "ext"), (Token.WORD, "pdf")]
query = Query("report ext:pdf", tokens, QueryFlag.NONE)

entry = Entry(name="report.pdf", parent="/home/me/docs", type=EntryType.FILE, size=1200)
context = MatchContext(entry)
print(query.match(context))        # True

context = MatchContext(entry)
query.highlight(context)
print(context.highlights(IndexType.NAME))
```

## Running the tests

```
pip install .[test]
pytest
```