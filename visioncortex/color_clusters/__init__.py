"""Hierarchical clustering of color images into a tree of clusters, run in resumable steps."""