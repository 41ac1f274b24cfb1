"""
CSS styles for the Vital Canvas UI.

This module contains all the CSS styling used by the Streamlit application,
organized as a single constant for easy maintenance and theming.
"""

STYLES = """
<style>
    /* ============================================
       CSS VARIABLES
       ============================================ */
    :root {
        --bg-primary: #0f1419;
        --bg-secondary: #1a2332;
        --bg-tertiary: #242f3d;
        
        --text-primary: #e6edf3;
        --text-secondary: #8b949e;
        --text-muted: #6e7681;
        
        --accent-primary: #14b8a6;
        --accent-primary-dim: rgba(20, 184, 166, 0.15);
        --accent-warning: #f59e0b;
        
        --border-subtle: rgba(255, 255, 255, 0.06);
        --border-default: rgba(255, 255, 255, 0.1);
        --glow-primary: 0 0 20px rgba(20, 184, 166, 0.45);
        
        --radius-sm: 6px;
        --radius-md: 10px;
        --transition-normal: 250ms ease;
    }
    
    .stApp {
        background: linear-gradient(135deg, var(--bg-primary) 0%, #0d1117 100%);
    }
    
    .stApp > header {
        background: transparent !important;
    }
    
    /* ============================================
       PATIENT CARDS
       ============================================ */
    .patient-card {
        background: var(--bg-secondary);
        border: 1px solid var(--border-subtle);
        border-radius: var(--radius-md);
        padding: 0.9rem 1rem;
        margin-bottom: 0.5rem;
        transition: box-shadow var(--transition-normal), border-color var(--transition-normal);
    }
    
    .patient-card.highlighted {
        border-color: var(--accent-primary);
        background: linear-gradient(180deg, var(--accent-primary-dim) 0%, var(--bg-secondary) 60%);
    }
    
    .patient-card.glowing {
        box-shadow: var(--glow-primary);
    }
    
    .patient-header {
        display: flex;
        justify-content: space-between;
        align-items: center;
    }
    
    .patient-name {
        font-weight: 600;
        color: var(--text-primary);
    }
    
    .risk-badge {
        color: #0f1419;
        font-weight: 700;
        border-radius: var(--radius-sm);
        padding: 0.1rem 0.5rem;
        font-size: 0.85rem;
    }
    
    .patient-meta, .group-description, .update-meta {
        color: var(--text-muted);
        font-size: 0.8rem;
        margin: 0.25rem 0;
    }
    
    .patient-row {
        color: var(--text-secondary);
        font-size: 0.85rem;
    }
    
    .lab-chip {
        display: inline-block;
        border: 1px solid var(--border-default);
        border-radius: var(--radius-sm);
        padding: 0.05rem 0.4rem;
        margin: 0.2rem 0.2rem 0 0;
        font-size: 0.75rem;
        color: var(--text-secondary);
    }
    
    .group-header {
        background: var(--bg-tertiary);
        border-radius: 0 var(--radius-sm) var(--radius-sm) 0;
        padding: 0.5rem 0.75rem;
        margin: 1rem 0 0.5rem 0;
        color: var(--text-primary);
    }
    
    /* ============================================
       RESEARCH STREAM
       ============================================ */
    .update-card {
        background: var(--bg-secondary);
        border-radius: 0 var(--radius-md) var(--radius-md) 0;
        padding: 0.75rem 1rem;
        margin-top: 0.75rem;
    }
    
    .update-title {
        color: var(--text-primary);
        font-weight: 600;
        margin-bottom: 0.25rem;
    }
    
    .update-summary {
        color: var(--text-secondary);
        font-size: 0.85rem;
    }
</style>
"""
