"""Row transforms that turn one sheet's grid into output rows.

Each strategy is picked once per run; the engine owns the file and sheet
iteration and only asks the strategy what a sheet contributes.
"""
EXTRACT = "extract"
CONCATENATE = "concatenate"
MERGE = "merge"

STRATEGY_KINDS = (EXTRACT, CONCATENATE, MERGE)


class RowStrategy:
    kind = None

    @property
    def header(self):
        """Explicit header row prepended once to the whole result, or None."""
        return None

    def transform_row(self, row, file_name, sheet_name):
        raise NotImplementedError

    def transform_sheet(self, grid, file_name, sheet_name):
        return [self.transform_row(row, file_name, sheet_name) for row in grid]


class FixedColumnExtractor(RowStrategy):
    """Keeps a fixed set of column positions and adds an empty Comments column."""
    kind = EXTRACT

    def __init__(self, positions, labels, comments_label="Comments"):
        if len(positions) != len(labels):
            raise ValueError("Every extracted column needs exactly one label.")
        self.positions = list(positions)
        self.labels = list(labels)
        self.comments_label = comments_label

    @property
    def header(self):
        return self.labels + [self.comments_label]

    def transform_row(self, row, file_name, sheet_name):
        picked = [row[pos] if pos < len(row) else "" for pos in self.positions]
        return picked + [""]


class PositionalConcatenator(RowStrategy):
    """Keeps every column as-is and appends the source file and sheet names."""
    kind = CONCATENATE

    def transform_row(self, row, file_name, sheet_name):
        return list(row) + [file_name, sheet_name]


class HeaderUnionMerger(RowStrategy):
    """Reads each sheet's first row as headers and emits one record per data row."""
    kind = MERGE

    def __init__(self, source_field="source_file"):
        self.source_field = source_field

    @staticmethod
    def header_keys(header_row):
        """Names blank headers __EMPTY, __EMPTY_1, ... and suffixes duplicates with _1, _2, ..."""
        keys = []
        counts = {}
        for cell in header_row:
            base = str(cell).strip() or "__EMPTY"
            key = base
            while key in counts:
                counts[base] += 1
                key = f"{base}_{counts[base]}"
            counts.setdefault(key, 0)
            keys.append(key)
        return keys

    def transform_row(self, row, file_name, sheet_name, keys=None):
        record = {key: value for key, value in zip(keys, row) if value != ""}
        record[self.source_field] = file_name
        return record

    def transform_sheet(self, grid, file_name, sheet_name):
        if not grid:
            return []
        keys = self.header_keys(grid[0])
        return [
            self.transform_row(row, file_name, sheet_name, keys=keys)
            for row in grid[1:]
            if any(value != "" for value in row)
        ]


def get_strategy(kind, settings):
    """Builds the strategy for ``kind`` using the loaded settings."""
    if kind == EXTRACT:
        return FixedColumnExtractor(
            settings["extract_positions"],
            settings["extract_labels"],
            settings["comments_label"],
        )
    if kind == CONCATENATE:
        return PositionalConcatenator()
    if kind == MERGE:
        return HeaderUnionMerger(settings["source_file_field"])
    raise ValueError(f"Unknown strategy '{kind}'. Expected one of {STRATEGY_KINDS}")
