"""
Query Layer - the engine

relation_index  lookups that turn joins into dictionary reads
predicates      composable selection predicates
pipeline        joins and a fluent pipeline over materialized lists
ordering        stable sort and top-K with an explicit policy for missing keys
aggregation     grouping, reduction and summary statistics
materializer    shape conversion of results for callers
"""
