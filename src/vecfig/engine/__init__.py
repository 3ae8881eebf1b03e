"""engine: 幾何カーネル・投影・スタイル・図モデル・出力コーデック。"""
