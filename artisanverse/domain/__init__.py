"""Pure domain helpers: record schemas, matching, paging, patching and seeds."""
