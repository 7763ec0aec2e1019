import pytest

from proinfer.intermediate import GroupGraph


@pytest.fixture
def make_graph(registry):
    """Build a group graph from ``{group id: (accessions, sequences, children)}``."""

    def _make(layout):
        graph = GroupGraph()
        for group_id, (accessions, sequences, _children) in sorted(layout.items()):
            group = graph.new_group(group_id, tree_id=1)
            for name in accessions:
                group.add_accession(registry.register_accession(name))
            for sequence in sequences:
                group.add_peptide(registry.register_peptide(sequence))
        for group_id, (_accessions, _sequences, children) in layout.items():
            for child_id in children:
                graph.link(group_id, child_id)
        return graph

    return _make
