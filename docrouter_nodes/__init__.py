"""
DocRouter integration nodes: credential types, a Prompt node and a Webhook trigger node.
"""
