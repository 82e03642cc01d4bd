import logging

import matplotlib.pyplot as plt
import numpy as np
import streamlit as st

from logic_circuit.analysis import analyze_expression
from logic_circuit.config import get_settings
from logic_circuit.logic import row_assignment

logger = logging.getLogger(__name__)

# ------------------------------- Page setup -------------------------------

ONE_COLOR = "#1f3c88"
ZERO_COLOR = "#9aa7b7"
MINTERM_FILL = "#e3f2fd"

settings = get_settings()

st.set_page_config(page_title=settings.page_title, layout="wide")
st.title(f"🔌 {settings.page_title}")
st.caption(
    "Simplify Boolean expressions with the Quine-McCluskey method. "
    f"Supports up to {settings.max_variables} variables and AND, OR, NOT, XOR, NAND, NOR."
)
st.markdown("---")

raw_expr = st.text_input("Expression (e.g. A AND NOT B OR (C XOR A)):")


# ------------------------------- Truth table grid -------------------------------
def draw_truth_table(variables, table):
    """Render the truth table as a grid, shading rows where the output is 1."""
    ncols = len(variables) + 1
    nrows = len(table)
    fig, ax = plt.subplots(figsize=(0.9 * ncols + 0.6, 0.32 * nrows + 0.8))
    ax.set_xlim(0, ncols)
    ax.set_ylim(-1, nrows)
    ax.set_xticks(np.arange(0, ncols + 1))
    ax.set_yticks(np.arange(-1, nrows + 1))
    ax.grid(True, color="#888", linewidth=0.8)
    ax.tick_params(length=0, labelbottom=False, labelleft=False)
    ax.invert_yaxis()
    ax.set_facecolor("#fafafa")

    for j, name in enumerate(list(variables) + ["F"]):
        ax.text(j + 0.5, -0.5, name, ha="center", va="center", fontsize=11, weight="bold")

    for idx, value in enumerate(table):
        if value:
            ax.add_patch(plt.Rectangle((0, idx), ncols, 1, color=MINTERM_FILL, zorder=0))
        bits = row_assignment(idx, variables)
        for j, name in enumerate(variables):
            ax.text(j + 0.5, idx + 0.5, str(int(bits[name])), ha="center", va="center", fontsize=10)
        ax.text(
            ncols - 0.5,
            idx + 0.5,
            "1" if value else "0",
            color=ONE_COLOR if value else ZERO_COLOR,
            ha="center",
            va="center",
            fontsize=11,
            weight="bold",
        )
    return fig


# ------------------------------- On submit -------------------------------
if st.button("Evaluate 🚀"):
    try:
        analysis = analyze_expression(raw_expr, settings)
    except ValueError as exc:
        logger.warning("Rejected expression %r: %s", raw_expr, exc)
        st.error(str(exc))
    else:
        result = analysis.result
        st.success(f"**Simplified:**  \nF = {result.simplified}")
        st.info(f"**Variables:** {', '.join(analysis.variables)}")
        if not analysis.sympy_agrees():
            st.warning("SymPy could not confirm that the simplified form is equivalent.")

        left, right = st.columns(2)
        with left:
            st.markdown("### Original circuit")
            st.code(analysis.parsed.ast.to_infix())
        with right:
            st.markdown("### Simplified circuit")
            if analysis.simplified_ast is not None:
                st.code(analysis.simplified_ast.to_infix())
                st.text(
                    "\n".join(f"{bits}  {term}" for term, bits in analysis.term_bits())
                )
            else:
                st.caption(f"Constant output: {result.simplified}")

        left, right = st.columns(2)
        with left:
            st.markdown("### Truth table")
            fig = draw_truth_table(analysis.variables, analysis.truth_table)
            st.pyplot(fig)
            plt.close(fig)
        with right:
            if settings.show_steps:
                st.markdown("### Quine-McCluskey steps")
                for number, step in enumerate(result.steps, start=1):
                    with st.expander(f"{number}. {step.title}", expanded=number == len(result.steps)):
                        st.write(step.description)
                        if step.data:
                            st.text("\n".join(step.data))
