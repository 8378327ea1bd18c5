"""
Categorical source catalog.

Distributions, rankings and correlation tables read from the snapshot files
written by the template, node and community-package fetch scripts.
"""

from typing import Tuple

from pulse.models.enums import (
    CategoricalDataType,
    DataLayout,
    FieldAggregate,
    RankingValueType,
    SizeHint,
)
from pulse.registry.definitions import (
    CategoricalSource,
    CorrelationField,
    DistributionField,
    RankingField,
)


TEMPLATES_FILE = '/data/all-templates-data.json'
NODES_FILE = '/data/all-nodes-data.json'
COMMUNITY_NODES_FILE = '/data/community-nodes.json'


CATEGORICAL_SOURCES: Tuple[CategoricalSource, ...] = (
    # -------------------------------------------------------------------------
    # Distributions
    # -------------------------------------------------------------------------
    CategoricalSource(
        id='template-complexity',
        label='Template Complexity',
        file=TEMPLATES_FILE,
        data_type=CategoricalDataType.DISTRIBUTION,
        size_hint=SizeHint.LARGE,
        distribution_fields=(
            # Pre-binned by the fetch script: one entry per node count
            DistributionField(
                id='nodes-per-template',
                label='Nodes per Template',
                data_path='complexity.distribution',
                value_key='nodeCount',
                label_key='label',
                count_key='count',
            ),
            DistributionField(
                id='creator-template-count',
                label='Templates per Top Creator',
                data_path='creators.top50',
                value_key='templateCount',
            ),
        ),
    ),
    CategoricalSource(
        id='package-downloads',
        label='Community Package Downloads',
        file=COMMUNITY_NODES_FILE,
        data_type=CategoricalDataType.DISTRIBUTION,
        size_hint=SizeHint.MEDIUM,
        distribution_fields=(
            DistributionField(
                id='downloads-weekly',
                label='Weekly Downloads per Package',
                data_path='packages',
                value_key='downloadsWeekly',
            ),
        ),
    ),
    # -------------------------------------------------------------------------
    # Rankings
    # -------------------------------------------------------------------------
    CategoricalSource(
        id='node-usage',
        label='Node Usage in Templates',
        file=NODES_FILE,
        data_type=CategoricalDataType.RANKING,
        size_hint=SizeHint.LARGE,
        data_path='nodes.all',
        label_field='displayName',
        group_by_field='category',
        ranking_fields=(
            RankingField('count', 'Templates Using Node'),
            RankingField('percentage', 'Share of Templates', RankingValueType.PERCENTAGE),
        ),
    ),
    CategoricalSource(
        id='node-categories',
        label='Node Categories',
        file=NODES_FILE,
        data_type=CategoricalDataType.RANKING,
        size_hint=SizeHint.LARGE,
        data_path='nodes.byCategory',
        data_layout=DataLayout.BY_CATEGORY,
        ranking_fields=(
            RankingField('nodeCount', 'Nodes in Category', aggregate=FieldAggregate.COUNT),
            RankingField('totalUsage', 'Total Usage', source_key='count', aggregate=FieldAggregate.SUM),
        ),
    ),
    CategoricalSource(
        id='top-creators',
        label='Top Template Creators',
        file=TEMPLATES_FILE,
        data_type=CategoricalDataType.RANKING,
        size_hint=SizeHint.LARGE,
        data_path='creators.top50',
        ranking_fields=(
            RankingField('templateCount', 'Templates'),
            RankingField('totalViews', 'Total Views'),
        ),
    ),
    CategoricalSource(
        id='community-packages',
        label='Community Packages',
        file=COMMUNITY_NODES_FILE,
        data_type=CategoricalDataType.RANKING,
        size_hint=SizeHint.MEDIUM,
        data_path='packages',
        group_by_field='category',
        ranking_fields=(
            RankingField('downloadsWeekly', 'Weekly Downloads'),
            RankingField('downloadsMonthly', 'Monthly Downloads'),
            RankingField('score', 'npm Score', RankingValueType.PERCENTAGE),
        ),
    ),
    # -------------------------------------------------------------------------
    # Correlations
    # -------------------------------------------------------------------------
    CategoricalSource(
        id='creator-reach',
        label='Creator Output vs Reach',
        file=TEMPLATES_FILE,
        data_type=CategoricalDataType.CORRELATION,
        size_hint=SizeHint.LARGE,
        data_path='creators.top50',
        correlation_fields=(
            CorrelationField('templateCount', 'Templates', 'templateCount'),
            CorrelationField('totalViews', 'Total Views', 'totalViews'),
        ),
    ),
    CategoricalSource(
        id='package-adoption',
        label='Package Adoption',
        file=COMMUNITY_NODES_FILE,
        data_type=CategoricalDataType.CORRELATION,
        size_hint=SizeHint.MEDIUM,
        data_path='packages',
        group_by_field='category',
        correlation_fields=(
            CorrelationField('downloadsWeekly', 'Weekly Downloads', 'downloadsWeekly'),
            CorrelationField('downloadsMonthly', 'Monthly Downloads', 'downloadsMonthly'),
            CorrelationField('score', 'npm Score', 'score'),
        ),
    ),
)
