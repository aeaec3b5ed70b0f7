"""Core resolution pipeline for codehost (options, config, instance, runtime)."""
