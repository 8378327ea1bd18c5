"""
Timeseries source catalog.

Every metric the playground can plot, grouped by the history file that backs
it. Paths are web paths ('/data/...') as published by the fetch scripts; the
data store resolves them against the configured data root or base URL.

When a fetch script starts writing a new history file, register it here.
"""

from typing import Tuple

from pulse.models.enums import Granularity
from pulse.registry.definitions import DataSource, MetricDefinition


DAILY = Granularity.DAILY
WEEKLY = Granularity.WEEKLY
MONTHLY = Granularity.MONTHLY
ALL_GRANULARITIES = (DAILY, WEEKLY, MONTHLY)


# Distinct, accessible colours per metric
COLORS = {
    # GitHub
    'stars': '#f0c14b',
    'forks': '#6e7681',
    'watchers': '#58a6ff',
    'issues': '#f85149',
    'issues_opened': '#da3633',
    'issues_closed': '#238636',
    # Community forum
    'users': '#22c55e',
    'topics': '#a855f7',
    'posts': '#3b82f6',
    'likes': '#ec4899',
    # Templates
    'templates_total': '#ff6b9d',
    'templates_new': '#4bc0c0',
    # Creators
    'creators_total': '#f97316',
    'creators_verified': '#14b8a6',
    'creator_views': '#8b5cf6',
    'creator_inserters': '#06b6d4',
    # Discord
    'discord_members': '#5865f2',
    'discord_online': '#57f287',
    # npm
    'npm_downloads': '#cb3837',
    # Bluesky
    'bluesky_posts': '#0085ff',
    'bluesky_authors': '#38bdf8',
    'bluesky_likes': '#f472b6',
    # Reddit
    'reddit_subscribers': '#ff4500',
    'reddit_posts': '#fb923c',
    # Community nodes
    'packages_total': '#eab308',
    'packages_downloads': '#84cc16',
}


DATA_SOURCES: Tuple[DataSource, ...] = (
    DataSource(
        id='github',
        label='GitHub',
        short_label='GH',
        file='/data/github-history.json',
        granularities=ALL_GRANULARITIES,
        default_granularity=MONTHLY,
        history_start='2019-06',
        # Before: ossinsight estimates; after: GitHub API
        measured_since='2026-01-08',
        metrics=(
            MetricDefinition('github-stars', 'GitHub Stars', COLORS['stars'], 'stars', exclude_zero=True),
            MetricDefinition('github-forks', 'GitHub Forks', COLORS['forks'], 'forks', exclude_zero=True),
            MetricDefinition('github-watchers', 'GitHub Watchers', COLORS['watchers'], 'watchers', exclude_zero=True),
            MetricDefinition('github-issues', 'Open Issues', COLORS['issues'], 'openIssues', exclude_zero=True),
            MetricDefinition('github-issues-opened', 'Issues Opened/Month', COLORS['issues_opened'], 'issuesOpened'),
            MetricDefinition('github-issues-closed', 'Issues Closed/Month', COLORS['issues_closed'], 'issuesClosed'),
        ),
    ),
    DataSource(
        id='community',
        label='Community Forum',
        short_label='Forum',
        file='/data/community-history.json',
        granularities=ALL_GRANULARITIES,
        default_granularity=MONTHLY,
        history_start='2019-11',
        # Before: wayback snapshots, interpolated; after: Discourse API
        measured_since='2026-01-07',
        metrics=(
            MetricDefinition('forum-users', 'Forum Members', COLORS['users'], 'users', exclude_zero=True),
            MetricDefinition('forum-topics', 'Forum Topics', COLORS['topics'], 'topics', exclude_zero=True),
            MetricDefinition('forum-posts', 'Forum Posts', COLORS['posts'], 'posts', exclude_zero=True),
            MetricDefinition('forum-likes', 'Forum Likes', COLORS['likes'], 'likes', exclude_zero=True),
        ),
    ),
    DataSource(
        id='templates',
        label='Templates',
        short_label='Tpl',
        file='/data/all-templates-data.json',
        granularities=(MONTHLY,),
        default_granularity=MONTHLY,
        history_start='2019-08',
        # Derived from template creation dates
        measured_since='2019-08',
        metrics=(
            MetricDefinition(
                'templates-total', 'Total Templates', COLORS['templates_total'],
                'timeline.monthly', value_key='cumulative', date_key='month',
            ),
            MetricDefinition(
                'templates-new', 'New Templates/Month', COLORS['templates_new'],
                'timeline.monthly', value_key='count', date_key='month',
            ),
            MetricDefinition(
                'templates-views', 'Total Views', COLORS['creator_views'], 'totalViews',
                exclude_zero=True,
                file='/data/history/creators-stats.json',
                measured_since='2024-11',
            ),
            MetricDefinition(
                'templates-inserters', 'Total Inserters', COLORS['creator_inserters'], 'totalInserters',
                exclude_zero=True,
                file='/data/history/creators-stats.json',
                measured_since='2024-11',
            ),
        ),
    ),
    DataSource(
        id='creators',
        label='Creators',
        short_label='Creators',
        file='/data/history/creators-stats.json',
        granularities=(DAILY, WEEKLY),
        default_granularity=WEEKLY,
        history_start='2024-11',
        measured_since='2024-11',
        metrics=(
            MetricDefinition('creators-total', 'Total Creators', COLORS['creators_total'], 'total', exclude_zero=True),
            MetricDefinition('creators-verified', 'Verified Creators', COLORS['creators_verified'], 'verified', exclude_zero=True),
        ),
    ),
    DataSource(
        id='discord',
        label='Discord',
        short_label='Discord',
        file='/data/history/discord.json',
        granularities=ALL_GRANULARITIES,
        default_granularity=DAILY,
        history_start='2026-01',
        measured_since='2026-01',
        metrics=(
            MetricDefinition('discord-members', 'Discord Members', COLORS['discord_members'], 'members', exclude_zero=True),
            MetricDefinition('discord-online', 'Discord Online', COLORS['discord_online'], 'online', exclude_zero=True),
        ),
    ),
    DataSource(
        id='npm',
        label='npm Downloads',
        short_label='npm',
        file='/data/history/npm-downloads.json',
        granularities=(WEEKLY,),
        default_granularity=WEEKLY,
        history_start='2019-10',
        measured_since='2019-10',
        metrics=(
            MetricDefinition(
                'npm-downloads', 'npm Downloads/Week', COLORS['npm_downloads'], 'downloads',
                date_key='weekStart', exclude_zero=True,
            ),
        ),
    ),
    DataSource(
        id='bluesky',
        label='Bluesky',
        short_label='Bsky',
        file='/data/history/bluesky.json',
        granularities=(DAILY, WEEKLY),
        default_granularity=WEEKLY,
        history_start='2024-11',
        measured_since='2024-11',
        metrics=(
            MetricDefinition('bluesky-posts', 'Bluesky Mentions', COLORS['bluesky_posts'], 'posts'),
            MetricDefinition('bluesky-authors', 'Bluesky Authors', COLORS['bluesky_authors'], 'uniqueAuthors'),
            MetricDefinition('bluesky-likes', 'Bluesky Likes', COLORS['bluesky_likes'], 'totalLikes'),
        ),
    ),
    DataSource(
        id='reddit',
        label='Reddit',
        short_label='Reddit',
        file='/data/history/reddit.json',
        granularities=(DAILY,),
        default_granularity=DAILY,
        history_start='2025-01',
        measured_since='2025-01',
        metrics=(
            MetricDefinition('reddit-subscribers', 'r/n8n Subscribers', COLORS['reddit_subscribers'], 'subscribers', exclude_zero=True),
            MetricDefinition('reddit-posts', 'r/n8n Posts/Day', COLORS['reddit_posts'], 'postsLast24h'),
        ),
    ),
    DataSource(
        id='community-nodes',
        label='Community Nodes',
        short_label='Nodes',
        file='/data/history/community-nodes.json',
        granularities=(WEEKLY,),
        default_granularity=WEEKLY,
        history_start='2025-06',
        measured_since='2025-06',
        metrics=(
            MetricDefinition('community-nodes-total', 'Community Packages', COLORS['packages_total'], 'totalPackages', exclude_zero=True),
            MetricDefinition(
                'community-nodes-downloads', 'Package Downloads/Week', COLORS['packages_downloads'],
                'totalDownloadsWeekly', exclude_zero=True,
            ),
        ),
    ),
)
