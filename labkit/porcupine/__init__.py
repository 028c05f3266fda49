"""Linearizability checker for operation and event histories."""