from .optimizer import OptimizationResult, ResumeOptimizer, get_optimizer

__all__ = ["OptimizationResult", "ResumeOptimizer", "get_optimizer"]
